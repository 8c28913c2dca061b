"""Tests for instruction decoding."""

import pytest
from octavm import decode, disassemble, Opcode, InvalidOpcode


class TestOperands:
    """Operand extraction."""

    def test_decode_fields(self):
        d = decode(0xD12F)
        assert d.op is Opcode.DRW
        assert d.opcode == 0xD
        assert (d.x, d.y, d.n) == (0x1, 0x2, 0xF)
        assert d.nn == 0x2F
        assert d.nnn == 0x12F
        assert d.raw == 0xD12F

    def test_decode_is_pure(self):
        assert decode(0x6A42) == decode(0x6A42)


class TestDispatch:
    """Every documented word maps to its instruction."""

    @pytest.mark.parametrize("word,op", [
        (0x0123, Opcode.SYS),
        (0x0001, Opcode.SYS),
        (0x00E0, Opcode.CLS),
        (0x00EE, Opcode.RET),
        (0x1ABC, Opcode.JP),
        (0x2ABC, Opcode.CALL),
        (0x3A12, Opcode.SE_IMM),
        (0x4A12, Opcode.SNE_IMM),
        (0x5AB0, Opcode.SE_REG),
        (0x6A12, Opcode.LD_IMM),
        (0x7A12, Opcode.ADD_IMM),
        (0x8AB0, Opcode.LD_REG),
        (0x8AB1, Opcode.OR),
        (0x8AB2, Opcode.AND),
        (0x8AB3, Opcode.XOR),
        (0x8AB4, Opcode.ADD_REG),
        (0x8AB5, Opcode.SUB),
        (0x8AB6, Opcode.SHR),
        (0x8AB7, Opcode.SUBN),
        (0x8ABE, Opcode.SHL),
        (0x9AB0, Opcode.SNE_REG),
        (0xAABC, Opcode.LD_I),
        (0xBABC, Opcode.JP_OFFSET),
        (0xCA12, Opcode.RND),
        (0xDAB5, Opcode.DRW),
        (0xEA9E, Opcode.SKP),
        (0xEAA1, Opcode.SKNP),
        (0xFA07, Opcode.LD_VX_DT),
        (0xFA0A, Opcode.LD_VX_K),
        (0xFA15, Opcode.LD_DT_VX),
        (0xFA18, Opcode.LD_ST_VX),
        (0xFA1E, Opcode.ADD_I_VX),
        (0xFA29, Opcode.LD_F_VX),
        (0xFA33, Opcode.LD_B_VX),
        (0xFA55, Opcode.LD_MEM_VX),
        (0xFA65, Opcode.LD_VX_MEM),
    ])
    def test_known_words(self, word, op):
        assert decode(word).op is op

    def test_every_opcode_reachable(self):
        assert len(Opcode) == 35


class TestInvalid:
    """Words outside the instruction set."""

    @pytest.mark.parametrize("word", [0x0000, 0xFFFF, 0xF000, 0xF0FF, 0xE000, 0xE09F, 0x8008, 0x800F, 0x5121, 0x912F])
    def test_invalid_words(self, word):
        with pytest.raises(InvalidOpcode) as excinfo:
            decode(word, address=0x2A4)

        assert excinfo.value.word == word
        assert excinfo.value.address == 0x2A4
        assert f"0x{word:04X}" in str(excinfo.value)
        assert "0x2A4" in str(excinfo.value)

    def test_address_is_optional(self):
        with pytest.raises(InvalidOpcode) as excinfo:
            decode(0xFFFF)
        assert excinfo.value.address is None

    def test_out_of_range_word(self):
        with pytest.raises(ValueError):
            decode(0x10000)


class TestDisassemble:
    """Mnemonic rendering."""

    @pytest.mark.parametrize("word,text", [
        (0x00E0, "CLS"),
        (0x2300, "CALL 0x300"),
        (0x8124, "ADD V1, V2"),
        (0xD01F, "DRW V0, V1, 15"),
        (0xF30A, "LD V3, K"),
        (0xFF55, "LD [I], VF"),
        (0xFFFF, "DW 0xFFFF"),
        (0x0000, "DW 0x0000"),
        (0x0123, "SYS 0x123"),
    ])
    def test_disassemble(self, word, text):
        assert disassemble(word) == text
