"""Tests for control flow instructions."""

import pytest
from octavm import execute, InvalidOpcode, OutOfBoundsMemoryAccess, StackOverflow, StackUnderflow
from conftest import with_registers


class TestJump:
    """Test jump instructions."""

    def test_execute_jump(self, fresh_state):
        """Test 1NNN - Jump to address."""
        state = execute(fresh_state, 0x1001)
        assert state.pc == 1

    def test_jump_to_last_address(self, fresh_state):
        state = execute(fresh_state, 0x1FFF)
        assert state.pc == 0xFFF


class TestCallReturn:
    """Subroutine calls and the 16-entry stack."""

    def test_call_pushes_pc(self, fresh_state):
        state = fresh_state.replace(pc=fresh_state.pc + 2)  # As after fetch

        state = execute(state, 0x2300)

        assert state.pc == 0x300
        assert state.stack.pointer == 1
        assert state.stack.data[0] == 0x202

    def test_nested_calls_return_in_order(self, fresh_state):
        state = execute(fresh_state, 0x2300)  # Pushes 0x200
        state = execute(state, 0x2400)  # Pushes 0x300

        state = execute(state, 0x00EE)
        assert state.pc == 0x300
        state = execute(state, 0x00EE)
        assert state.pc == 0x200
        assert state.stack.pointer == 0

    def test_sixteen_calls_fit(self, fresh_state):
        state = fresh_state
        for _ in range(16):
            state = execute(state, 0x2300)
        assert state.stack.pointer == 16

    def test_seventeenth_call_overflows(self, fresh_state):
        state = fresh_state
        for _ in range(16):
            state = execute(state, 0x2300)

        with pytest.raises(StackOverflow):
            execute(state, 0x2300)

    def test_return_with_empty_stack(self, fresh_state):
        state = fresh_state.replace(pc=fresh_state.pc + 2)  # As after fetch

        with pytest.raises(StackUnderflow) as excinfo:
            execute(state, 0x00EE)

        assert excinfo.value.address == 0x200


class TestSkipInstructions:
    """3XNN, 4XNN, 5XY0 and 9XY0 skip the next word when their condition holds."""

    @pytest.mark.parametrize("instruction,registers,skips", [
        (0x3542, {5: 0x42}, True),
        (0x3542, {5: 0x41}, False),
        (0x30FF, {0: 0xFF}, True),
        (0x3000, {}, True),  # Fresh registers are zero
        (0x4320, {3: 0x10}, True),
        (0x4320, {3: 0x20}, False),
        (0x5120, {1: 0x55, 2: 0x55}, True),
        (0x5120, {1: 0x55, 2: 0x44}, False),
        (0x9780, {7: 0xAA, 8: 0xBB}, True),
        (0x9780, {7: 0xCC, 8: 0xCC}, False),
    ])
    def test_skip(self, fresh_state, instruction, registers, skips):
        state = with_registers(fresh_state, registers)

        state = execute(state, instruction)

        assert state.pc == 0x200 + (2 if skips else 0)

    @pytest.mark.parametrize("instruction", [0x5121, 0x912F])
    def test_register_skips_need_zero_low_nibble(self, fresh_state, instruction):
        with pytest.raises(InvalidOpcode):
            execute(fresh_state, instruction)


class TestKeySkips:
    """EX9E/EXA1 read the keypad through VX."""

    def test_skip_if_key_pressed(self, fresh_state):
        state = execute(fresh_state, 0x6005)  # V0 = 5
        state = state.replace(keypad=state.keypad.at[5].set(True))
        initial_pc = state.pc

        state = execute(state, 0xE09E)
        assert state.pc == initial_pc + 2

    def test_no_skip_if_key_released(self, fresh_state):
        state = execute(fresh_state, 0x6005)
        initial_pc = state.pc

        state = execute(state, 0xE09E)
        assert state.pc == initial_pc

    def test_skip_if_key_not_pressed(self, fresh_state):
        state = execute(fresh_state, 0x6005)
        initial_pc = state.pc

        state = execute(state, 0xE0A1)
        assert state.pc == initial_pc + 2

    def test_no_skip_if_not_pressed_but_pressed(self, fresh_state):
        state = execute(fresh_state, 0x6005)
        state = state.replace(keypad=state.keypad.at[5].set(True))
        initial_pc = state.pc

        state = execute(state, 0xE0A1)
        assert state.pc == initial_pc

    def test_key_index_uses_low_nibble(self, fresh_state):
        state = execute(fresh_state, 0x60F3)  # V0 = 0xF3 → key 3
        state = state.replace(keypad=state.keypad.at[3].set(True))
        initial_pc = state.pc

        state = execute(state, 0xE09E)
        assert state.pc == initial_pc + 2


class TestJumpWithOffset:
    """Test jump with offset in both jump_quirk settings."""

    def test_jump_with_offset_default(self, fresh_state):
        """BNNN - Jump with V0 offset."""
        state = execute(fresh_state, 0x6010)  # V0 = 0x10
        state = execute(state, 0xB250)  # Jump to 0x250 + V0
        assert state.pc == 0x260

    def test_jump_with_offset_quirk(self, jump_quirk_state):
        """BXNN - Jump with VX offset."""
        state = execute(jump_quirk_state, 0x6210)  # V2 = 0x10
        state = execute(state, 0xB250)  # Jump to 0x250 + V2
        assert state.pc == 0x260

    def test_jump_mode_comparison(self):
        """jump_quirk changes which register is added."""
        from octavm import create_state, Quirks

        state_default = create_state()
        state_default = execute(state_default, 0x6010)  # V0 = 0x10
        state_default = execute(state_default, 0x6230)  # V2 = 0x30
        state_default = execute(state_default, 0xB250)

        state_quirk = create_state(quirks=Quirks(jump_quirk=True))
        state_quirk = execute(state_quirk, 0x6010)  # V0 = 0x10
        state_quirk = execute(state_quirk, 0x6230)  # V2 = 0x30
        state_quirk = execute(state_quirk, 0xB250)

        assert state_default.pc == 0x260  # 0x250 + 0x10 (used V0)
        assert state_quirk.pc == 0x280  # 0x250 + 0x30 (used V2)

    def test_jump_past_memory_is_an_error(self, fresh_state):
        state = execute(fresh_state, 0x60FF)  # V0 = 0xFF

        with pytest.raises(OutOfBoundsMemoryAccess) as excinfo:
            execute(state, 0xBFFF)

        assert excinfo.value.address == 0xFFF + 0xFF
