"""CHIP-8 delay and sound timers.

Both timers count down by one per 60Hz tick. The interpreter never measures
time itself: the driver calls :func:`tick_timers` at a fixed logical rate,
independently of how many instructions it executes in between.
"""

import jax.numpy as jnp
from octavm.state import EmulatorState


def _decrement(timer: jnp.ndarray) -> jnp.ndarray:
    return jnp.where(timer > 0, timer - 1, timer).astype(jnp.uint8)


def tick_timers(state: EmulatorState) -> EmulatorState:
    """Advance both timers by one 1/60 s unit, never going below zero."""
    return state.replace(
        delay_timer=_decrement(state.delay_timer),
        sound_timer=_decrement(state.sound_timer),
    )


def sound_active(state: EmulatorState) -> bool:
    """True whenever the sound timer is nonzero."""
    return bool(state.sound_timer > 0)
