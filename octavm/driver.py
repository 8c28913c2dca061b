"""Headless driver helpers: fixed-rate timer cadence and frame loops."""

from typing import Optional

from flax.struct import dataclass, field

from octavm.constants import TIMER_HZ
from octavm.errors import ExecutionError
from octavm.interpreter import Interpreter
from octavm.logging import build_progress_bar


class FixedStepClock:
    """Accumulator turning elapsed wall time into whole 60Hz timer ticks.

    Leftover time carries over, so calling :meth:`advance` with irregular
    intervals still yields exactly ``rate`` ticks per second on average.
    """

    def __init__(self, rate: int = TIMER_HZ):
        if rate <= 0:
            raise ValueError(f"Tick rate must be positive, got {rate}")
        self.rate = rate
        self.period = 1.0 / rate
        self._accumulator = 0.0

    def advance(self, elapsed: float) -> int:
        """Add ``elapsed`` seconds and return how many ticks are now due."""
        if elapsed < 0:
            raise ValueError(f"Elapsed time cannot be negative, got {elapsed}")
        self._accumulator += elapsed
        ticks = int(self._accumulator // self.period)
        self._accumulator -= ticks * self.period
        return ticks

    def reset(self):
        self._accumulator = 0.0


@dataclass(frozen=True)
class RunSummary:
    """Outcome of :func:`run_frames`."""
    frames: int
    instructions: int
    error: Optional[ExecutionError] = field(pytree_node=False, default=None)

    @property
    def halted(self) -> bool:
        return self.error is not None


def run_frames(
    interpreter: Interpreter,
    frames: int,
    instructions_per_frame: int = 10,
    progress: bool = False,
) -> RunSummary:
    """Run ``frames`` logical 60Hz frames without a display.

    Each frame ticks the timers once, then steps ``instructions_per_frame``
    times. Stops at the first halt instead of raising.
    """
    if instructions_per_frame <= 0:
        raise ValueError(f"instructions_per_frame must be positive, got {instructions_per_frame}")

    bar = build_progress_bar(frames) if progress else None
    instructions = 0
    frame = 0
    error = interpreter.error()
    try:
        while frame < frames and error is None:
            interpreter.tick_timers()
            for _ in range(instructions_per_frame):
                try:
                    interpreter.step()
                except ExecutionError as exc:
                    error = exc
                    break
                instructions += 1
            frame += 1
            if bar is not None:
                bar.update(1)
    finally:
        if bar is not None:
            bar.close()

    interpreter.logger.log_run_summary(frame, instructions, error is not None)
    return RunSummary(frames=frame, instructions=instructions, error=error)
