"""Bounds-checked access to CHIP-8 memory."""

import jax.numpy as jnp
import numpy as np

from octavm.constants import MAX_ADDRESS, PROGRAM_START, MAX_PROGRAM_SIZE
from octavm.errors import OutOfBoundsMemoryAccess, RomTooLarge
from octavm.state import EmulatorState


def check_range(address: int, length: int = 1) -> None:
    """Raise OutOfBoundsMemoryAccess for the first address of the range outside memory."""
    if address < 0:
        raise OutOfBoundsMemoryAccess(address)
    if length > 0 and address + length - 1 > MAX_ADDRESS:
        raise OutOfBoundsMemoryAccess(max(address, MAX_ADDRESS + 1))


def read_byte(state: EmulatorState, address: int) -> int:
    check_range(address)
    return int(state.memory[address])


def write_byte(state: EmulatorState, address: int, value: int) -> EmulatorState:
    check_range(address)
    return state.replace(memory=state.memory.at[address].set(int(value) & 0xFF))


def read_word(state: EmulatorState, address: int) -> int:
    """Read a big-endian 16-bit word from address and address + 1."""
    check_range(address, 2)
    return (int(state.memory[address]) << 8) | int(state.memory[address + 1])


def read_bytes(state: EmulatorState, address: int, length: int) -> jnp.ndarray:
    check_range(address, length)
    return state.memory[address:address + length]


def write_bytes(state: EmulatorState, address: int, values) -> EmulatorState:
    values = jnp.asarray(values, dtype=jnp.uint8)
    check_range(address, len(values))
    return state.replace(memory=state.memory.at[address:address + len(values)].set(values))


def load_program(state: EmulatorState, data) -> EmulatorState:
    """Copy program bytes into memory starting at 0x200.

    Args:
        state: State to load into; returned unchanged on failure.
        data: ``bytes``, ``bytearray``, a numpy array or a sequence of ints 0..255.

    Returns:
        State with ``memory[0x200:0x200 + len(data)]`` holding the program.

    Raises:
        RomTooLarge: when ``len(data)`` exceeds 3584 bytes.
    """
    if isinstance(data, (bytes, bytearray, memoryview)):
        rom = np.frombuffer(bytes(data), dtype=np.uint8)
    else:
        rom = np.asarray(data)
        if rom.size and (rom.min() < 0 or rom.max() > 0xFF):
            raise ValueError("ROM values must be bytes in the range 0-255")
        rom = rom.astype(np.uint8)
    if len(rom) > MAX_PROGRAM_SIZE:
        raise RomTooLarge(len(rom), MAX_PROGRAM_SIZE)
    return write_bytes(state, PROGRAM_START, rom)
