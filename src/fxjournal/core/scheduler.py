from __future__ import annotations

import time
from dataclasses import dataclass
from time import monotonic


@dataclass(slots=True)
class IntervalScheduler:
    """Fixed-rate ticker: sleeps until the next multiple of ``interval_sec``."""

    interval_sec: float
    _next_ts: float | None = None

    def start(self) -> None:
        self._next_ts = monotonic()

    def sleep_until_next(self) -> float:
        if self._next_ts is None:
            self.start()
        assert self._next_ts is not None
        self._next_ts += self.interval_sec
        remaining = self._next_ts - monotonic()
        if remaining > 0:
            time.sleep(remaining)
            return remaining
        # Fell behind; resync instead of bursting through missed ticks.
        self._next_ts = monotonic()
        return 0.0
