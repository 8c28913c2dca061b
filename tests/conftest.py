"""Test configuration and fixtures for CHIP-8 interpreter tests."""

import pytest
import jax.numpy as jnp
from octavm import create_state, Quirks, PROGRAM_START
from octavm.logging import InterpreterLogger


@pytest.fixture
def fresh_state():
    """Provide a fresh emulator state with default quirks."""
    return create_state()


@pytest.fixture
def shift_quirk_state():
    """Shifts operate on VX in place."""
    return create_state(quirks=Quirks(shift_quirk=True))


@pytest.fixture
def load_store_quirk_state():
    """FX55/FX65 leave I untouched."""
    return create_state(quirks=Quirks(load_store_quirk=True))


@pytest.fixture
def jump_quirk_state():
    """BXNN jumps relative to VX."""
    return create_state(quirks=Quirks(jump_quirk=True))


@pytest.fixture
def clip_state():
    """Sprites are clipped at the screen edges."""
    return create_state(quirks=Quirks(wrap_quirk=False))


@pytest.fixture
def vf_reset_state():
    """Bitwise ops reset VF."""
    return create_state(quirks=Quirks(vf_reset_quirk=True))


@pytest.fixture
def quiet_logger():
    """Logger that only reports critical messages."""
    return InterpreterLogger(log_level="CRITICAL", use_colors=False)


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def program(*words):
    """Assemble instruction words into big-endian ROM bytes."""
    return b"".join(word.to_bytes(2, "big") for word in words)


def with_program(state, *words):
    """Place instruction words at 0x200."""
    return setup_sprite_in_memory(state, PROGRAM_START, list(program(*words)))


def with_registers(state, values):
    """Set V registers from an ``{index: value}`` mapping."""
    V = state.V
    for index, value in values.items():
        V = V.at[index].set(value)
    return state.replace(V=V)
