"""CPU-time stopwatches that accumulate over several start/stop sessions."""

from __future__ import annotations

import sys
import time
from types import TracebackType


class CpuTimer:
    """A named stopwatch measuring process CPU time.

    Elapsed time accumulates across start/stop sessions until ``reset``.
    Starting a running timer or stopping a stopped one is reported on
    stderr and otherwise tolerated.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._start = 0.0
        self._stop = 0.0
        self._elapsed = 0.0
        self._running = False

    @property
    def elapsed(self) -> float:
        """Accumulated CPU seconds of the completed sessions."""
        return self._elapsed

    @property
    def running(self) -> bool:
        """Whether the timer is currently running."""
        return self._running

    def start(self) -> None:
        """Start a new timing session."""
        if self._running:
            print(f"Error, running timer {self.name} started.", file=sys.stderr)
        self._running = True
        self._start = time.process_time()

    def stop(self) -> None:
        """End the current session and add its duration to the total."""
        self._stop = time.process_time()
        if not self._running:
            print(f"Error, stopped timer {self.name} stopped again.", file=sys.stderr)
        else:
            self._elapsed += self._stop - self._start
        self._running = False

    def reset(self) -> None:
        """Clear the accumulated time."""
        self._elapsed = 0.0

    def report(self) -> str:
        """Stop the timer if needed and describe the total elapsed time."""
        if self._running:
            self.stop()
        return f"Elapsed CPU Time {self.name} = {self._elapsed:.2f} seconds"

    def report_per_iteration(self, repeats: int) -> str:
        """Stop the timer if needed and describe the time per repetition."""
        if repeats < 1:
            raise ValueError("repeats must be 1 or more")
        if self._running:
            self.stop()
        per_iteration = self._elapsed / repeats
        return (
            f"Elapsed CPU Time per Iteration ({self.name}, {repeats}) = "
            f"{per_iteration:.6e} seconds"
        )

    def __enter__(self) -> CpuTimer:
        self.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.stop()