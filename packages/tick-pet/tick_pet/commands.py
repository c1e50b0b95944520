"""Player commands and the queue that serialises them with ticks."""
from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass
from typing import Any, Callable


@dataclass(frozen=True)
class Feed:
    pass


@dataclass(frozen=True)
class Play:
    pass


@dataclass(frozen=True)
class Sleep:
    """Toggle: puts an awake pet to bed, wakes a sleeping one."""


@dataclass(frozen=True)
class Clean:
    pass


@dataclass(frozen=True)
class Revive:
    pass


@dataclass(frozen=True)
class Reset:
    pass


class CommandQueue:
    """FIFO of commands, drained between ticks by the engine loop.

    ``enqueue`` may be called from any thread. ``drain`` must only run on
    the thread that ticks. One handler per command class.
    """

    def __init__(self) -> None:
        self._handlers: dict[type[Any], Callable[[Any], bool]] = {}
        self._pending: deque[Any] = deque()
        self._lock = threading.Lock()

    def handle(self, cmd_type: type[Any], handler: Callable[[Any], bool]) -> None:
        """Register ``handler(cmd) -> bool``. Later calls overwrite."""
        self._handlers[cmd_type] = handler

    def enqueue(self, cmd: Any) -> None:
        if type(cmd) not in self._handlers:
            raise TypeError(f"No handler registered for {type(cmd).__qualname__}")
        with self._lock:
            self._pending.append(cmd)

    def pending(self) -> int:
        with self._lock:
            return len(self._pending)

    def drain(self) -> list[tuple[Any, bool]]:
        """Run every queued command in order. Returns ``[(cmd, accepted), ...]``."""
        with self._lock:
            batch = list(self._pending)
            self._pending.clear()
        results: list[tuple[Any, bool]] = []
        for cmd in batch:
            accepted = self._handlers[type(cmd)](cmd)
            results.append((cmd, accepted))
        return results
