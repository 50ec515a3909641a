"""Wall-clock source for the countdown (millisecond epoch time)"""

import time
from typing import Protocol


class Clock(Protocol):
    """Anything that can report the current epoch time in milliseconds"""

    def now_ms(self) -> int:
        ...


class SystemClock:
    """Best-effort wall clock; no skew correction."""

    def now_ms(self) -> int:
        return int(time.time() * 1000)


SYSTEM_CLOCK = SystemClock()
