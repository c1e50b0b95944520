"""Pet events the engine reports to the presentation layer.

Each ``Signal`` carries a fixed set of payload keys, checked when it is
published:

    evolved    old, new, evolution_type
    died       age, life_stage
    woke       age
    poop       count
    action     action
    revived    (none)
    reset      (none)
    caught_up  ticks, elapsed
"""
from __future__ import annotations

from typing import Any, Callable

from tick_pet.types import Signal

Handler = Callable[[Signal, dict[str, Any]], None]

PAYLOAD_KEYS: dict[Signal, frozenset[str]] = {
    Signal.EVOLVED: frozenset({"old", "new", "evolution_type"}),
    Signal.DIED: frozenset({"age", "life_stage"}),
    Signal.WOKE: frozenset({"age"}),
    Signal.POOP: frozenset({"count"}),
    Signal.ACTION: frozenset({"action"}),
    Signal.REVIVED: frozenset(),
    Signal.RESET: frozenset(),
    Signal.CAUGHT_UP: frozenset({"ticks", "elapsed"}),
}


class SignalBus:
    """Holds pet events until the engine has finished applying a change.

    ``publish`` only queues; ``flush`` delivers, so handlers always see the
    state after the whole tick or action. Handlers subscribed with
    ``None`` hear every signal, after the ones subscribed to it by name.
    """

    def __init__(self) -> None:
        self._handlers: dict[Signal | None, list[Handler]] = {}
        self._queue: list[tuple[Signal, dict[str, Any]]] = []

    def subscribe(self, signal: Signal | str | None, handler: Handler) -> None:
        """Raises ValueError for a name that is not a Signal."""
        key = None if signal is None else Signal(signal)
        self._handlers.setdefault(key, []).append(handler)

    def unsubscribe(self, signal: Signal | str | None, handler: Handler) -> bool:
        key = None if signal is None else Signal(signal)
        handlers = self._handlers.get(key, [])
        if handler not in handlers:
            return False
        handlers.remove(handler)
        return True

    def publish(self, signal: Signal | str, **payload: Any) -> None:
        signal = Signal(signal)
        expected = PAYLOAD_KEYS[signal]
        if set(payload) != expected:
            raise ValueError(
                f"{signal.value} carries {sorted(expected)}, got {sorted(payload)}"
            )
        self._queue.append((signal, payload))

    def flush(self) -> int:
        """Deliver what was queued before this call. Returns how many signals.

        Anything a handler publishes waits for the next flush.
        """
        pending, self._queue = self._queue, []
        for signal, payload in pending:
            for handler in self._handlers.get(signal, []) + self._handlers.get(None, []):
                handler(signal, payload)
        return len(pending)

    def pending(self) -> int:
        return len(self._queue)

    def clear(self) -> None:
        self._queue.clear()
