"""
SystemClock — wall-clock time for production use.
"""
from __future__ import annotations

import dataclasses
import time


@dataclasses.dataclass(frozen=True)
class SystemClock:
    """Reads time.time(). Stateless; one instance can be shared freely."""

    def now(self) -> float:
        return time.time()
