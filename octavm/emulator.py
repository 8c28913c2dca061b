"""Main CHIP-8 emulator execution engine."""

from typing import Optional, Union

from octavm.state import EmulatorState, Running, WaitingForKey, Halted, set_register
from octavm.decode import DecodedInstruction, Opcode, decode
from octavm.errors import ExecutionError
from octavm.keypad import pressed_keys, first_new_press
from octavm.memory import read_word
from octavm.instructions.system import no_op, execute_clear_screen, execute_return
from octavm.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset,
    execute_skip_if_key, execute_skip_if_not_key
)
from octavm.instructions.alu import execute_alu_operation
from octavm.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from octavm.instructions.display import execute_display
from octavm.instructions.misc import (
    execute_get_delay_timer, execute_wait_for_key, execute_set_delay_timer,
    execute_set_sound_timer, execute_add_to_index, execute_font_character,
    execute_bcd_conversion, execute_store_registers, execute_load_registers
)

HANDLERS = {
    Opcode.SYS: no_op,
    Opcode.CLS: execute_clear_screen,
    Opcode.RET: execute_return,
    Opcode.JP: execute_jump,
    Opcode.CALL: execute_call,
    Opcode.SE_IMM: execute_skip_if_equal_immediate,
    Opcode.SNE_IMM: execute_skip_if_not_equal_immediate,
    Opcode.SE_REG: execute_skip_if_equal_register,
    Opcode.LD_IMM: execute_set,
    Opcode.ADD_IMM: execute_add,
    Opcode.LD_REG: execute_alu_operation,
    Opcode.OR: execute_alu_operation,
    Opcode.AND: execute_alu_operation,
    Opcode.XOR: execute_alu_operation,
    Opcode.ADD_REG: execute_alu_operation,
    Opcode.SUB: execute_alu_operation,
    Opcode.SHR: execute_alu_operation,
    Opcode.SUBN: execute_alu_operation,
    Opcode.SHL: execute_alu_operation,
    Opcode.SNE_REG: execute_skip_if_not_equal_register,
    Opcode.LD_I: execute_set_index,
    Opcode.JP_OFFSET: execute_jump_with_offset,
    Opcode.RND: execute_random,
    Opcode.DRW: execute_display,
    Opcode.SKP: execute_skip_if_key,
    Opcode.SKNP: execute_skip_if_not_key,
    Opcode.LD_VX_DT: execute_get_delay_timer,
    Opcode.LD_VX_K: execute_wait_for_key,
    Opcode.LD_DT_VX: execute_set_delay_timer,
    Opcode.LD_ST_VX: execute_set_sound_timer,
    Opcode.ADD_I_VX: execute_add_to_index,
    Opcode.LD_F_VX: execute_font_character,
    Opcode.LD_B_VX: execute_bcd_conversion,
    Opcode.LD_MEM_VX: execute_store_registers,
    Opcode.LD_VX_MEM: execute_load_registers,
}

def execute(
    state: EmulatorState,
    instruction: Union[int, DecodedInstruction],
    address: Optional[int] = None,
) -> EmulatorState:
    """Execute single CHIP-8 instruction.

    Does not fetch: PC only changes through the instruction's own effect.
    Handlers assume PC already points past the instruction, as after
    :func:`fetch`, and report stack faults at PC - 2.
    Raises ExecutionError subclasses on faults.
    """
    if not isinstance(instruction, DecodedInstruction):
        instruction = decode(instruction, address)
    return HANDLERS[instruction.op](state, instruction)

def fetch(state: EmulatorState) -> tuple[EmulatorState, int]:
    """Fetch next instruction from memory and advance PC past it."""
    instruction = read_word(state, int(state.pc))
    return state.replace(pc=state.pc + 2), instruction

def _resume_from_key_wait(state: EmulatorState) -> EmulatorState:
    status = state.status
    key = first_new_press(state, status.held)
    if key is None:
        still_held = tuple(k for k in status.held if k in pressed_keys(state))
        if still_held == status.held:
            return state
        return state.replace(status=status.replace(held=still_held))
    state = set_register(state, status.register, key)
    return state.replace(pc=state.pc + 2, status=Running())

def step(state: EmulatorState) -> EmulatorState:
    """Advance the executor by one instruction.

    Halted states are returned untouched. While waiting for a key this only
    polls the keypad. Execution faults never propagate from here: the returned
    state is the pre-step machine state with ``Halted(error)`` status.
    """
    if isinstance(state.status, Halted):
        return state
    if isinstance(state.status, WaitingForKey):
        return _resume_from_key_wait(state)

    address = int(state.pc)
    try:
        next_state, instruction = fetch(state)
        next_state = execute(next_state, instruction, address)
    except ExecutionError as error:
        return state.replace(status=Halted(error=error))
    return next_state

def halted(state: EmulatorState) -> bool:
    return isinstance(state.status, Halted)

def run(state: EmulatorState, n: int) -> EmulatorState:
    """Step up to ``n`` times, stopping early once halted."""
    for _ in range(n):
        state = step(state)
        if halted(state):
            break
    return state

def current_instruction(state: EmulatorState) -> Optional[int]:
    """Word at PC, or None when PC points outside memory."""
    if int(state.pc) > 0xFFE:
        return None
    return (int(state.memory[int(state.pc)]) << 8) | int(state.memory[int(state.pc) + 1])

