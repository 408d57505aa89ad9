"""
Clock — the time source used by QueueStore.

Lock timestamps and message names are both derived from the clock, so tests
can inject a ManualClock and move time forward explicitly instead of sleeping
or patching the time module.

now()
  - Returns the current time as epoch seconds (float).
  - QueueStore truncates to whole seconds before writing or comparing locks.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Clock(Protocol):
    """
    Minimal interface required by QueueStore.

    Implementing adapters (built-in):
      - SystemClock — wall-clock time via time.time()
      - ManualClock — settable time, for tests
    """

    def now(self) -> float:
        """Current time in seconds since the epoch."""
        ...
