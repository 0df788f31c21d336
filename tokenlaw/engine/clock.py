"""Clock sources for rebalancer timestamps (integer seconds)."""

import time
from typing import Callable

Clock = Callable[[], int]


def system_clock() -> int:
    """Wall clock in whole seconds."""
    return int(time.time())


class ManualClock:
    """Clock advanced explicitly; used for deterministic replays and tests."""

    def __init__(self, start: int = 0):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> int:
        if seconds < 0:
            raise ValueError("clock is monotonic; cannot advance by a negative amount")
        self.now += seconds
        return self.now
