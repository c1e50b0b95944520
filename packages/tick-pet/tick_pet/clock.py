"""Time sources. The engine never reads the system clock directly."""
from __future__ import annotations

import time
from typing import Protocol, runtime_checkable


@runtime_checkable
class TimeSource(Protocol):
    """Wall-clock provider in epoch milliseconds."""

    def now_ms(self) -> int:
        ...

    def sleep(self, seconds: float) -> None:
        ...


class SystemClock:
    def now_ms(self) -> int:
        return int(time.time() * 1000)

    def sleep(self, seconds: float) -> None:
        if seconds > 0:
            time.sleep(seconds)


class ManualClock:
    """Settable clock for tests and deterministic runs.

    ``sleep()`` does not block, it moves the clock forward instead.
    """

    def __init__(self, start_ms: int = 0) -> None:
        self._now = start_ms

    def now_ms(self) -> int:
        return self._now

    def sleep(self, seconds: float) -> None:
        if seconds > 0:
            self._now += int(round(seconds * 1000))

    def advance(self, ms: int) -> int:
        if ms < 0:
            raise ValueError(f"cannot advance by a negative amount, got {ms}")
        self._now += ms
        return self._now

    def set(self, now_ms: int) -> None:
        self._now = now_ms
