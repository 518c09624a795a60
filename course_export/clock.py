"""Clock abstraction so token expiry, batch deadlines and file times are testable."""

import time
from typing import Protocol


class Clock(Protocol):
    def time(self) -> int:
        """Current time as integer Unix seconds."""
        ...


class SystemClock:
    """Wall-clock time."""

    def time(self) -> int:
        return int(time.time())


class FixedClock:
    """A clock that only moves when told to. For tests and replays."""

    def __init__(self, now: int):
        self.now = now

    def time(self) -> int:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += seconds
