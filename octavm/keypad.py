"""CHIP-8 hexadecimal keypad state."""

from typing import Optional

import jax.numpy as jnp
from octavm.constants import NUM_KEYS
from octavm.errors import InvalidKeyIndex
from octavm.state import EmulatorState


def _check_index(index) -> int:
    if isinstance(index, bool) or not isinstance(index, (int, jnp.integer)) or not 0 <= index < NUM_KEYS:
        raise InvalidKeyIndex(index)
    return int(index)


def set_key(state: EmulatorState, index: int, pressed: bool) -> EmulatorState:
    """Record the pressed/released state of key ``index`` (0x0-0xF)."""
    index = _check_index(index)
    return state.replace(keypad=state.keypad.at[index].set(bool(pressed)))


def set_keys(state: EmulatorState, pressed) -> EmulatorState:
    """Replace the whole keypad with a 16-entry boolean sequence."""
    keypad = jnp.asarray(pressed, dtype=jnp.bool_)
    if keypad.shape != (NUM_KEYS,):
        raise ValueError(f"Expected {NUM_KEYS} key states, got shape {keypad.shape}")
    return state.replace(keypad=keypad)


def is_pressed(state: EmulatorState, index: int) -> bool:
    return bool(state.keypad[_check_index(index)])


def pressed_keys(state: EmulatorState) -> tuple:
    """Indices of every key currently down."""
    return tuple(int(k) for k in jnp.flatnonzero(state.keypad))


def first_new_press(state: EmulatorState, held: tuple) -> Optional[int]:
    """Lowest key pressed now that was not in ``held``, or None."""
    for key in pressed_keys(state):
        if key not in held:
            return key
    return None
