"""CHIP-8 virtual machine package."""

from octavm.state import (
    EmulatorState, Quirks, Running, WaitingForKey, Halted, create_state,
)
from octavm.emulator import execute, fetch, step, run, halted
from octavm.decode import DecodedInstruction, Opcode, decode, disassemble
from octavm.errors import (
    Chip8Error, ExecutionError, RomTooLarge, InvalidKeyIndex, InvalidOpcode,
    StackOverflow, StackUnderflow, OutOfBoundsMemoryAccess,
)
from octavm.memory import load_program, read_byte, write_byte, read_word
from octavm.timers import tick_timers, sound_active
from octavm.keypad import set_key
from octavm.constants import *
from octavm.interpreter import Interpreter
from octavm.driver import FixedStepClock, RunSummary, run_frames

__all__ = [
    "EmulatorState",
    "Quirks",
    "Running",
    "WaitingForKey",
    "Halted",
    "create_state",
    "execute",
    "fetch",
    "step",
    "run",
    "halted",
    "DecodedInstruction",
    "Opcode",
    "decode",
    "disassemble",
    "Chip8Error",
    "ExecutionError",
    "RomTooLarge",
    "InvalidKeyIndex",
    "InvalidOpcode",
    "StackOverflow",
    "StackUnderflow",
    "OutOfBoundsMemoryAccess",
    "load_program",
    "read_byte",
    "write_byte",
    "read_word",
    "tick_timers",
    "sound_active",
    "set_key",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "Interpreter",
    "FixedStepClock",
    "RunSummary",
    "run_frames",
]
