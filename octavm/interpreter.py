"""Stateful interpreter handle driven by a frontend loop."""

from typing import Callable, Optional

import jax
import numpy as np

from octavm.constants import MAX_PROGRAM_SIZE, PROGRAM_START
from octavm.emulator import step as step_state, current_instruction, halted
from octavm.errors import ExecutionError
from octavm.keypad import set_key as set_key_state
from octavm.logging import InterpreterLogger
from octavm.memory import load_program
from octavm.state import EmulatorState, Quirks, Status, Halted, create_state
from octavm.timers import tick_timers as tick_timers_state, sound_active


class Interpreter:
    """One CHIP-8 machine.

    Owns a single :class:`EmulatorState` and replaces it on every mutation. The
    driver calls :meth:`step` at whatever instruction rate it likes and
    :meth:`tick_timers` at 60Hz; both return promptly. Not thread-safe: call
    all mutators from one loop, and hand frames to other threads through
    :meth:`frame`, which returns a copy.

    Args:
        quirks: Behaviour toggles, fixed for the lifetime of the interpreter.
        rng: JAX PRNG key used by CXNN when no ``random_source`` is given.
        random_source: Callable returning a byte for CXNN, for deterministic replay.
        logger: Where loads and halts are reported.
    """

    def __init__(
        self,
        quirks: Optional[Quirks] = None,
        rng: Optional[jax.Array] = None,
        random_source: Optional[Callable[[], int]] = None,
        logger: Optional[InterpreterLogger] = None,
    ):
        self._quirks = Quirks() if quirks is None else quirks
        self._rng = jax.random.PRNGKey(0) if rng is None else rng
        self._random_source = random_source
        self.logger = logger or InterpreterLogger()
        self._program = b""
        self._state = self._power_on_state()

    def _power_on_state(self) -> EmulatorState:
        return create_state(self._rng, self._quirks, self._random_source)

    @property
    def state(self) -> EmulatorState:
        return self._state

    @property
    def quirks(self) -> Quirks:
        return self._quirks

    @property
    def status(self) -> Status:
        return self._state.status

    @property
    def halted(self) -> bool:
        return halted(self._state)

    @property
    def pc(self) -> int:
        return int(self._state.pc)

    @property
    def draw_flag(self) -> bool:
        """True when CLS or DRW ran since the last :meth:`frame` call."""
        return self._state.draw_flag

    @property
    def sound_active(self) -> bool:
        return sound_active(self._state)

    def load(self, rom) -> None:
        """Load program bytes at 0x200.

        Raises:
            RomTooLarge: when the program exceeds 3584 bytes; nothing is loaded.
        """
        self._state = load_program(self._state, rom)
        self._program = bytes(np.asarray(self._state.memory[PROGRAM_START:PROGRAM_START + len(rom)]))
        self.logger.log_load(len(self._program), MAX_PROGRAM_SIZE)

    def reset(self) -> None:
        """Return to power-on state and reload the last loaded program."""
        self._state = load_program(self._power_on_state(), self._program)

    def step(self) -> None:
        """Execute exactly one instruction, or poll the keypad while waiting.

        Raises:
            ExecutionError: the fault that halted the interpreter, on the step
                that hit it and on every later call.
        """
        was_halted = self.halted
        self._state = step_state(self._state)
        if isinstance(self._state.status, Halted):
            error = self._state.status.error
            if not was_halted:
                self.logger.log_halt(self._state, error, current_instruction(self._state))
            raise error

    def tick_timers(self) -> None:
        """Advance delay and sound timers by one 60Hz unit."""
        self._state = tick_timers_state(self._state)

    def set_key(self, index: int, pressed: bool) -> None:
        """Update one keypad flag.

        Raises:
            InvalidKeyIndex: when ``index`` is not in 0..15; keypad unchanged.
        """
        self._state = set_key_state(self._state, index, pressed)

    def frame(self) -> np.ndarray:
        """Read-only ``(32, 64)`` boolean snapshot of the display, indexed ``[y, x]``."""
        pixels = np.array(self._state.display, dtype=np.bool_)
        pixels.flags.writeable = False
        self._state = self._state.replace(draw_flag=False)
        return pixels

    def error(self) -> Optional[ExecutionError]:
        """The halting error, if any."""
        if isinstance(self._state.status, Halted):
            return self._state.status.error
        return None
