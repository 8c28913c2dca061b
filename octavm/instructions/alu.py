"""CHIP-8 ALU operations (8xxx)."""

from typing import Optional

from octavm.state import EmulatorState, set_register
from octavm.decode import DecodedInstruction, Opcode

# Each operation maps (VX, VY) to (new VX, new VF); a VF of None leaves VF alone.


def alu_set(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY0 - Set: VX = VY."""
    return vy, None


def alu_or(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY1 - Binary OR: VX |= VY."""
    return vx | vy, None


def alu_and(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY2 - Binary AND: VX &= VY."""
    return vx & vy, None


def alu_xor(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY3 - Logical XOR: VX ^= VY."""
    return vx ^ vy, None


def alu_add(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY4 - Add: VX += VY, VF = carry."""
    result = vx + vy
    return result & 0xFF, int(result > 0xFF)


def alu_sub_xy(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY5 - Subtract: VX -= VY, VF = 1 when there is no borrow."""
    return (vx - vy) & 0xFF, int(vx >= vy)


def alu_shift_right(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY6 - Shift right, VF = bit shifted out."""
    return vx >> 1, vx & 1


def alu_sub_yx(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY7 - Subtract: VX = VY - VX, VF = 1 when there is no borrow."""
    return (vy - vx) & 0xFF, int(vy >= vx)


def alu_shift_left(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XYE - Shift left, VF = bit shifted out."""
    return (vx << 1) & 0xFF, (vx & 0x80) >> 7


ALU_OPERATIONS = {
    Opcode.LD_REG: alu_set,
    Opcode.OR: alu_or,
    Opcode.AND: alu_and,
    Opcode.XOR: alu_xor,
    Opcode.ADD_REG: alu_add,
    Opcode.SUB: alu_sub_xy,
    Opcode.SHR: alu_shift_right,
    Opcode.SUBN: alu_sub_yx,
    Opcode.SHL: alu_shift_left,
}

_SHIFTS = (Opcode.SHR, Opcode.SHL)
_BITWISE = (Opcode.OR, Opcode.AND, Opcode.XOR)


def execute_alu_operation(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """8XYN - ALU operations dispatcher.

    VF is written after VX, so a flag result wins when X is F.
    """
    vx = int(state.V[instruction.x])
    vy = int(state.V[instruction.y])

    if instruction.op in _SHIFTS and not state.quirks.shift_quirk:
        vx = vy

    result, vf = ALU_OPERATIONS[instruction.op](vx, vy)
    if vf is None and instruction.op in _BITWISE and state.quirks.vf_reset_quirk:
        vf = 0

    state = set_register(state, instruction.x, result)
    if vf is not None:
        state = set_register(state, 0xF, vf)
    return state
