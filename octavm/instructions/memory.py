"""CHIP-8 memory and register operations."""

import jax
import jax.numpy as jnp
from octavm.state import EmulatorState, set_register
from octavm.decode import DecodedInstruction


def execute_set(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """6XNN - Set VX = NN."""
    return set_register(state, instruction.x, instruction.nn)


def execute_add(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """7XNN - Add NN to VX, VF untouched."""
    return set_register(state, instruction.x, int(state.V[instruction.x]) + instruction.nn)


def execute_set_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """ANNN - Set I = NNN."""
    return state.replace(I=jnp.asarray(instruction.nnn, dtype=jnp.uint16))


def random_byte(state: EmulatorState) -> tuple[EmulatorState, int]:
    """Draw one byte from the injected source, or from the state's PRNG key."""
    if state.random_source is not None:
        return state, int(state.random_source()) & 0xFF
    key, subkey = jax.random.split(state.rng)
    value = jax.random.randint(subkey, shape=(), minval=0, maxval=256, dtype=jnp.int32)
    return state.replace(rng=key), int(value)


def execute_random(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """CXNN - Set VX = random & NN."""
    state, value = random_byte(state)
    return set_register(state, instruction.x, value & instruction.nn)
