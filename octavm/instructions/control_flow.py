"""CHIP-8 control flow instructions."""

import jax.numpy as jnp
from octavm.constants import MAX_ADDRESS
from octavm.errors import OutOfBoundsMemoryAccess
from octavm.state import EmulatorState, instruction_address
from octavm.decode import DecodedInstruction
from octavm.stack import push


def _jump_to(state: EmulatorState, address: int) -> EmulatorState:
    if address > MAX_ADDRESS:
        raise OutOfBoundsMemoryAccess(address)
    return state.replace(pc=jnp.asarray(address, dtype=jnp.uint16))


def execute_jump(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """1NNN - Jump to address NNN."""
    return _jump_to(state, instruction.nnn)


def execute_call(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """2NNN - Call subroutine at NNN.

    PC already points past the CALL, so that is the address pushed.
    """
    state = state.replace(stack=push(state.stack, int(state.pc), instruction_address(state)))
    return execute_jump(state, instruction)


def make_skip_instruction(condition_fn):
    """Factory for skip instructions."""
    def skip_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        if condition_fn(state, instruction):
            return state.replace(pc=state.pc + 2)
        return state
    return skip_instruction


execute_skip_if_equal_immediate = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) == inst.nn
)

execute_skip_if_not_equal_immediate = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) != inst.nn
)

execute_skip_if_equal_register = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) == int(state.V[inst.y])
)

execute_skip_if_not_equal_register = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) != int(state.V[inst.y])
)

execute_skip_if_key = make_skip_instruction(
    lambda state, inst: bool(state.keypad[int(state.V[inst.x]) & 0xF])
)

execute_skip_if_not_key = make_skip_instruction(
    lambda state, inst: not bool(state.keypad[int(state.V[inst.x]) & 0xF])
)


def execute_jump_with_offset(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """BNNN - Jump to NNN + V0, or to XNN + VX with the jump quirk."""
    if state.quirks.jump_quirk:
        return _jump_to(state, instruction.nnn + int(state.V[instruction.x]))
    return _jump_to(state, instruction.nnn + int(state.V[0]))
