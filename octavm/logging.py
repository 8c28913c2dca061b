"""Console logging utilities for octavm interpreters.

This module provides a small levelled console logger plus an interpreter
flavoured subclass that formats machine state for halts and run summaries.
Long headless runs report progress through tqdm.
"""

import time
import sys
from typing import Optional

from tqdm import tqdm

from octavm.decode import disassemble
from octavm.stack import depth, return_addresses


LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

LEVEL_COLORS = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[35m",
}
RESET_COLOR = "\033[0m"


class ConsoleLogger:
    """Levelled console logger with optional colors and timestamps.

    Colors are only emitted when the target stream is a terminal.
    """

    def __init__(
        self,
        name: str = "octavm",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
        stream=None,
    ):
        level = log_level.upper()
        if level not in LEVELS:
            raise ValueError(f"Unknown log level '{log_level}'. Available: {list(LEVELS)}")

        self.name = name
        self.log_level = level
        self.threshold = LEVELS.index(level)
        self.stream = stream or sys.stdout
        isatty = getattr(self.stream, "isatty", None)
        self.use_colors = use_colors and isatty is not None and isatty()
        self.show_timestamps = show_timestamps
        self.start_time = time.time()

    def _should_log(self, level: str) -> bool:
        level = level.upper()
        rank = LEVELS.index(level) if level in LEVELS else LEVELS.index("INFO")
        return rank >= self.threshold

    def _format_message(self, level: str, message: str) -> str:
        prefix = f"[{level:>8s}]"
        if self.use_colors:
            prefix = f"{LEVEL_COLORS.get(level, '')}{prefix}{RESET_COLOR}"
        if self.show_timestamps:
            prefix = f"[{time.time() - self.start_time:8.2f}s]{prefix}"
        return f"{prefix}[{self.name}] {message}"

    def log(self, level: str, message: str):
        if self._should_log(level):
            print(self._format_message(level.upper(), message), file=self.stream, flush=True)

    def debug(self, message: str):
        self.log("DEBUG", message)

    def info(self, message: str):
        self.log("INFO", message)

    def warning(self, message: str):
        self.log("WARNING", message)

    def error(self, message: str):
        self.log("ERROR", message)

    def critical(self, message: str):
        self.log("CRITICAL", message)


def format_registers(state) -> list[str]:
    """Register dump as four lines of four registers each."""
    lines = []
    for i in range(0, 16, 4):
        lines.append(" ".join(f"V{j:X}:{int(state.V[j]):02X}" for j in range(i, i + 4)))
    return lines


class InterpreterLogger(ConsoleLogger):
    """Logger that knows how to describe interpreter state."""

    def __init__(self, name: str = "octavm", **kwargs):
        kwargs.setdefault("log_level", "WARNING")
        super().__init__(name, **kwargs)

    def log_load(self, size: int, limit: int):
        self.debug(f"Loaded program: {size} bytes ({size / limit * 100:.1f}% of program memory)")

    def log_halt(self, state, error: Exception, word: Optional[int] = None):
        """Log the halting error together with PC, I, stack depth and registers."""
        if not self._should_log("ERROR"):
            return
        self.error(f"Halted: {error}")
        instruction = f" ({disassemble(word)})" if word is not None else ""
        self.error(
            f"  PC: 0x{int(state.pc):03X}{instruction} | I: 0x{int(state.I):03X} "
            f"| SP: {depth(state.stack)}"
        )
        for line in format_registers(state):
            self.error(f"  {line}")
        stacked = return_addresses(state.stack)
        if stacked:
            self.error("  Stack: " + " ".join(f"0x{a:03X}" for a in stacked))

    def log_run_summary(self, frames: int, instructions: int, halted: bool):
        elapsed = time.time() - self.start_time
        rate = instructions / elapsed if elapsed > 0 else 0.0
        status = "HALTED" if halted else "RUNNING"
        self.info(
            f"Ran {frames} frames, {instructions} instructions "
            f"({rate:.0f} instr/s) | Status: {status}"
        )


def build_progress_bar(n: int, desc: Optional[str] = None, **kwargs) -> tqdm:
    """Frame progress bar for headless runs."""
    if desc is None:
        desc = f"Running ({n:,} frames)"

    for kwarg in ("total", "unit"):
        kwargs.pop(kwarg, None)

    return tqdm(total=n, desc=desc, unit="frame", **kwargs)
