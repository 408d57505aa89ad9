"""
ManualClock — settable time for testing and development.

Time only moves when the caller says so, which makes lock expiry
deterministic: claim, advance(timeout - 1), still locked; advance(2), stale.

Several QueueStore handles may share one ManualClock to simulate consumers
in separate processes observing the same wall clock.
"""
from __future__ import annotations

import dataclasses


@dataclasses.dataclass
class ManualClock:
    """
    In-process clock that starts at `start` and changes only on request.

    Parameters
    ----------
    start : initial epoch seconds (default 1_700_000_000)
    """

    start: float = 1_700_000_000.0

    def __post_init__(self) -> None:
        self._now: float = self.start

    def now(self) -> float:
        return self._now

    def advance(self, seconds: float) -> None:
        """Move time forward by `seconds`."""
        if seconds < 0:
            raise ValueError("ManualClock cannot move backwards")
        self._now += seconds

    def set(self, timestamp: float) -> None:
        """Jump to an absolute epoch timestamp."""
        self._now = timestamp
