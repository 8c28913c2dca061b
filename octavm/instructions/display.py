"""CHIP-8 display operations."""

import jax.numpy as jnp
from octavm.state import EmulatorState, set_register
from octavm.decode import DecodedInstruction
from octavm.constants import SCREEN_WIDTH, SCREEN_HEIGHT
from octavm.memory import read_bytes

_BIT_SHIFTS = 7 - jnp.arange(8, dtype=jnp.uint8)
_COLUMNS = jnp.arange(8)


def sprite_layer(display: jnp.ndarray, sprite: jnp.ndarray, x: int, y: int, wrap: bool) -> jnp.ndarray:
    """Place sprite rows on an empty screen-sized layer with its top-left corner at (x, y).

    Pixels past the right or bottom edge wrap around when ``wrap`` is set and
    are dropped otherwise.
    """
    bits = ((sprite[:, None] >> _BIT_SHIFTS[None, :]) & 1).astype(jnp.bool_)
    rows = y + jnp.arange(sprite.shape[0])
    cols = x + _COLUMNS
    if wrap:
        rows = rows % SCREEN_HEIGHT
        cols = cols % SCREEN_WIDTH
    return jnp.zeros_like(display).at[rows[:, None], cols[None, :]].set(bits, mode="drop")


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - Draw sprite at (VX, VY) with height N.

    The sprite is XORed onto the display; VF is 1 when any lit pixel is turned off.
    """
    sprite_x = int(state.V[instruction.x]) % SCREEN_WIDTH
    sprite_y = int(state.V[instruction.y]) % SCREEN_HEIGHT
    sprite = read_bytes(state, int(state.I), instruction.n)

    layer = sprite_layer(state.display, sprite, sprite_x, sprite_y, state.quirks.wrap_quirk)
    collision = bool(jnp.any(state.display & layer))

    state = state.replace(display=state.display ^ layer, draw_flag=True)
    return set_register(state, 0xF, int(collision))
