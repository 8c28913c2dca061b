"""CHIP-8 instruction decoding."""

import enum
from typing import Optional

from chex import dataclass

from octavm.errors import InvalidOpcode


class Opcode(enum.Enum):
    """Every CHIP-8 instruction shape, named after its conventional mnemonic."""
    SYS = "0NNN"
    CLS = "00E0"
    RET = "00EE"
    JP = "1NNN"
    CALL = "2NNN"
    SE_IMM = "3XNN"
    SNE_IMM = "4XNN"
    SE_REG = "5XY0"
    LD_IMM = "6XNN"
    ADD_IMM = "7XNN"
    LD_REG = "8XY0"
    OR = "8XY1"
    AND = "8XY2"
    XOR = "8XY3"
    ADD_REG = "8XY4"
    SUB = "8XY5"
    SHR = "8XY6"
    SUBN = "8XY7"
    SHL = "8XYE"
    SNE_REG = "9XY0"
    LD_I = "ANNN"
    JP_OFFSET = "BNNN"
    RND = "CXNN"
    DRW = "DXYN"
    SKP = "EX9E"
    SKNP = "EXA1"
    LD_VX_DT = "FX07"
    LD_VX_K = "FX0A"
    LD_DT_VX = "FX15"
    LD_ST_VX = "FX18"
    ADD_I_VX = "FX1E"
    LD_F_VX = "FX29"
    LD_B_VX = "FX33"
    LD_MEM_VX = "FX55"
    LD_VX_MEM = "FX65"


# Groups fully identified by their high nibble.
_SIMPLE = {
    0x1: Opcode.JP,
    0x2: Opcode.CALL,
    0x3: Opcode.SE_IMM,
    0x4: Opcode.SNE_IMM,
    0x6: Opcode.LD_IMM,
    0x7: Opcode.ADD_IMM,
    0xA: Opcode.LD_I,
    0xB: Opcode.JP_OFFSET,
    0xC: Opcode.RND,
    0xD: Opcode.DRW,
}

# Register comparisons need a zero low nibble.
_REGISTER_SKIPS = {
    0x5: Opcode.SE_REG,
    0x9: Opcode.SNE_REG,
}

_ALU = {
    0x0: Opcode.LD_REG,
    0x1: Opcode.OR,
    0x2: Opcode.AND,
    0x3: Opcode.XOR,
    0x4: Opcode.ADD_REG,
    0x5: Opcode.SUB,
    0x6: Opcode.SHR,
    0x7: Opcode.SUBN,
    0xE: Opcode.SHL,
}

_KEY = {
    0x9E: Opcode.SKP,
    0xA1: Opcode.SKNP,
}

_MISC = {
    0x07: Opcode.LD_VX_DT,
    0x0A: Opcode.LD_VX_K,
    0x15: Opcode.LD_DT_VX,
    0x18: Opcode.LD_ST_VX,
    0x1E: Opcode.ADD_I_VX,
    0x29: Opcode.LD_F_VX,
    0x33: Opcode.LD_B_VX,
    0x55: Opcode.LD_MEM_VX,
    0x65: Opcode.LD_VX_MEM,
}


@dataclass(frozen=True)
class DecodedInstruction:
    """Decoded CHIP-8 instruction with extracted operands."""
    raw: int
    op: Opcode
    opcode: int  # First nibble
    x: int       # Second nibble (VX register)
    y: int       # Third nibble (VY register)
    n: int       # Fourth nibble (4-bit immediate)
    nn: int      # Last byte (8-bit immediate)
    nnn: int     # Last 12 bits (12-bit address)


def _classify(instruction: int, group: int, n: int, nn: int) -> Optional[Opcode]:
    if group == 0x0:
        if instruction == 0x00E0:
            return Opcode.CLS
        if instruction == 0x00EE:
            return Opcode.RET
        # Zeroed memory is not a routine call
        return Opcode.SYS if instruction else None
    if group in _SIMPLE:
        return _SIMPLE[group]
    if group in _REGISTER_SKIPS:
        return _REGISTER_SKIPS[group] if n == 0 else None
    if group == 0x8:
        return _ALU.get(n)
    if group == 0xE:
        return _KEY.get(nn)
    return _MISC.get(nn)


def decode(instruction: int, address: Optional[int] = None) -> DecodedInstruction:
    """Decode a 16-bit instruction word.

    Args:
        instruction: Raw word, high byte first.
        address: Where the word was fetched from, reported by InvalidOpcode.

    Raises:
        InvalidOpcode: when the word matches no instruction.
    """
    instruction = int(instruction)
    if not 0 <= instruction <= 0xFFFF:
        raise ValueError(f"Instruction word out of range: {instruction:#x}")

    group = (instruction & 0xF000) >> 12
    n = instruction & 0x000F
    nn = instruction & 0x00FF
    op = _classify(instruction, group, n, nn)
    if op is None:
        raise InvalidOpcode(address, instruction)

    return DecodedInstruction(
        raw=instruction,
        op=op,
        opcode=group,
        x=(instruction & 0x0F00) >> 8,
        y=(instruction & 0x00F0) >> 4,
        n=n,
        nn=nn,
        nnn=instruction & 0x0FFF
    )


def disassemble(instruction: int) -> str:
    """Render a word as assembler-style text, e.g. ``ADD V1, V2``."""
    try:
        d = decode(instruction)
    except InvalidOpcode:
        return f"DW 0x{int(instruction):04X}"

    x, y = f"V{d.x:X}", f"V{d.y:X}"
    formats = {
        Opcode.SYS: f"SYS 0x{d.nnn:03X}",
        Opcode.CLS: "CLS",
        Opcode.RET: "RET",
        Opcode.JP: f"JP 0x{d.nnn:03X}",
        Opcode.CALL: f"CALL 0x{d.nnn:03X}",
        Opcode.SE_IMM: f"SE {x}, 0x{d.nn:02X}",
        Opcode.SNE_IMM: f"SNE {x}, 0x{d.nn:02X}",
        Opcode.SE_REG: f"SE {x}, {y}",
        Opcode.LD_IMM: f"LD {x}, 0x{d.nn:02X}",
        Opcode.ADD_IMM: f"ADD {x}, 0x{d.nn:02X}",
        Opcode.LD_REG: f"LD {x}, {y}",
        Opcode.OR: f"OR {x}, {y}",
        Opcode.AND: f"AND {x}, {y}",
        Opcode.XOR: f"XOR {x}, {y}",
        Opcode.ADD_REG: f"ADD {x}, {y}",
        Opcode.SUB: f"SUB {x}, {y}",
        Opcode.SHR: f"SHR {x}, {y}",
        Opcode.SUBN: f"SUBN {x}, {y}",
        Opcode.SHL: f"SHL {x}, {y}",
        Opcode.SNE_REG: f"SNE {x}, {y}",
        Opcode.LD_I: f"LD I, 0x{d.nnn:03X}",
        Opcode.JP_OFFSET: f"JP V0, 0x{d.nnn:03X}",
        Opcode.RND: f"RND {x}, 0x{d.nn:02X}",
        Opcode.DRW: f"DRW {x}, {y}, {d.n}",
        Opcode.SKP: f"SKP {x}",
        Opcode.SKNP: f"SKNP {x}",
        Opcode.LD_VX_DT: f"LD {x}, DT",
        Opcode.LD_VX_K: f"LD {x}, K",
        Opcode.LD_DT_VX: f"LD DT, {x}",
        Opcode.LD_ST_VX: f"LD ST, {x}",
        Opcode.ADD_I_VX: f"ADD I, {x}",
        Opcode.LD_F_VX: f"LD F, {x}",
        Opcode.LD_B_VX: f"LD B, {x}",
        Opcode.LD_MEM_VX: f"LD [I], {x}",
        Opcode.LD_VX_MEM: f"LD {x}, [I]",
    }
    return formats[d.op]
