"""One-shot wall-clock timers for cosmetic state flips.

These run on the TimeSource, not on the tick count, so an animation flag
clears after its duration however many ticks happen in between.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from tick_pet.clock import TimeSource


@dataclass
class Timer:
    """Pending callback. Fires once at or after ``deadline`` (epoch ms)."""

    name: str
    deadline: int
    callback: Callable[[], None]


class TimerQueue:
    def __init__(self, clock: TimeSource) -> None:
        self._clock = clock
        self._timers: dict[str, Timer] = {}

    def schedule(self, name: str, delay_ms: int, callback: Callable[[], None]) -> None:
        """Arm *name* to fire after *delay_ms*. Re-arming replaces the old timer."""
        if delay_ms < 0:
            raise ValueError(f"delay_ms must be >= 0, got {delay_ms}")
        self._timers[name] = Timer(
            name=name, deadline=self._clock.now_ms() + delay_ms, callback=callback,
        )

    def cancel(self, name: str) -> bool:
        return self._timers.pop(name, None) is not None

    def cancel_all(self) -> None:
        self._timers.clear()

    def pending(self, name: str) -> bool:
        return name in self._timers

    def next_deadline(self) -> int | None:
        if not self._timers:
            return None
        return min(t.deadline for t in self._timers.values())

    def poll(self) -> list[str]:
        """Fire every due timer, earliest first. Returns the fired names."""
        now = self._clock.now_ms()
        due = sorted(
            (t for t in self._timers.values() if t.deadline <= now),
            key=lambda t: t.deadline,
        )
        fired: list[str] = []
        for timer in due:
            # A callback may have cancelled or re-armed a later one.
            if self._timers.get(timer.name) is not timer:
                continue
            del self._timers[timer.name]
            timer.callback()
            fired.append(timer.name)
        return fired

    def __len__(self) -> int:
        return len(self._timers)
