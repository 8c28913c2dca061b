"""CHIP-8 emulator state structures."""

from typing import Callable, Optional, Union

import jax
import jax.numpy as jnp
from flax.struct import dataclass, PyTreeNode, field

from octavm.constants import (
    PROGRAM_START, FONT_START, FONT_DATA, MEMORY_SIZE, SCREEN_WIDTH, SCREEN_HEIGHT,
    STACK_SIZE, NUM_REGISTERS, NUM_KEYS,
)
from octavm.errors import ExecutionError


@dataclass(frozen=True)
class Quirks:
    """Behaviour toggles reconciling divergent CHIP-8 implementations.

    The defaults follow the original COSMAC VIP interpreter for shifts,
    register load/store and BNNN, wrap sprites around the screen edges and
    leave VF alone on bitwise operations.

    Attributes:
        shift_quirk: 8XY6/8XYE shift VX in place instead of shifting VY into VX.
        load_store_quirk: FX55/FX65 leave I untouched instead of advancing it by X+1.
        jump_quirk: BXNN jumps to XNN + VX instead of NNN + V0.
        wrap_quirk: sprite pixels past the screen edge wrap to the opposite side;
            when False they are clipped.
        vf_reset_quirk: 8XY1/8XY2/8XY3 reset VF to 0.
    """
    shift_quirk: bool = field(pytree_node=False, default=False)
    load_store_quirk: bool = field(pytree_node=False, default=False)
    jump_quirk: bool = field(pytree_node=False, default=False)
    wrap_quirk: bool = field(pytree_node=False, default=True)
    vf_reset_quirk: bool = field(pytree_node=False, default=False)

    @property
    def clip_quirk(self) -> bool:
        return not self.wrap_quirk

    @classmethod
    def cosmac(cls) -> "Quirks":
        """Original COSMAC VIP behaviour."""
        return cls(vf_reset_quirk=True, wrap_quirk=False)

    @classmethod
    def modern(cls) -> "Quirks":
        """CHIP-48/SUPER-CHIP behaviour most modern ROMs expect."""
        return cls(shift_quirk=True, load_store_quirk=True, jump_quirk=True, wrap_quirk=False)


@dataclass(frozen=True)
class Running:
    """Executor fetches and executes instructions."""


@dataclass(frozen=True)
class WaitingForKey:
    """FX0A is pending: the next newly pressed key goes into V[register].

    ``held`` lists the keys that were already down when the wait started; they
    only count once released and pressed again.
    """
    register: int = field(pytree_node=False)
    held: tuple = field(pytree_node=False, default=())


@dataclass(frozen=True)
class Halted:
    """Terminal state entered on an execution fault."""
    error: ExecutionError = field(pytree_node=False)


Status = Union[Running, WaitingForKey, Halted]


@dataclass(frozen=True)
class StackState:
    """Stack state for subroutine calls."""
    data: jnp.ndarray = field(default_factory=lambda: jnp.zeros(STACK_SIZE, dtype=jnp.uint16))
    pointer: int = 0


class EmulatorState(PyTreeNode):
    """Main CHIP-8 emulator state.

    ``display`` is row-major: ``display[y, x]`` with the origin at the top-left.
    ``random_source``, when given, replaces the PRNG key for CXNN and must
    return an int in 0..255.
    """
    rng: jax.Array = field(default_factory=lambda: jax.random.PRNGKey(0))
    memory: jnp.ndarray = field(default_factory=lambda: jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8))
    pc: jnp.ndarray = field(default_factory=lambda: jnp.asarray(PROGRAM_START, dtype=jnp.uint16))
    display: jnp.ndarray = field(default_factory=lambda: jnp.zeros((SCREEN_HEIGHT, SCREEN_WIDTH), dtype=jnp.bool_))
    stack: StackState = field(default_factory=StackState)
    delay_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    sound_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    keypad: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_KEYS, dtype=jnp.bool_))
    V: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_REGISTERS, dtype=jnp.uint8))
    I: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    quirks: Quirks = field(pytree_node=False, default_factory=Quirks)
    status: Status = field(pytree_node=False, default_factory=Running)
    draw_flag: bool = field(pytree_node=False, default=False)
    random_source: Optional[Callable[[], int]] = field(pytree_node=False, default=None)


def create_state(
    rng: Optional[jax.Array] = None,
    quirks: Optional[Quirks] = None,
    random_source: Optional[Callable[[], int]] = None,
) -> EmulatorState:
    """Create initial emulator state with font data loaded."""
    state = EmulatorState(
        rng=jax.random.PRNGKey(0) if rng is None else rng,
        quirks=Quirks() if quirks is None else quirks,
        random_source=random_source,
    )
    return state.replace(memory=state.memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(FONT_DATA))


def set_register(state: EmulatorState, index: int, value: int) -> EmulatorState:
    """Write an 8-bit value to V[index], wrapping mod 256."""
    return state.replace(V=state.V.at[index].set(int(value) & 0xFF))


def instruction_address(state: EmulatorState) -> int:
    """Address of the executing instruction; fetch has already moved PC past it."""
    return (int(state.pc) - 2) & 0xFFFF
