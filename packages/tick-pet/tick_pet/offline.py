"""Replay the ticks a creature missed while nobody was watching."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from tick_pet.types import Signal

if TYPE_CHECKING:
    from tick_pet.engine import PetEngine

logger = logging.getLogger(__name__)


def elapsed_ticks(last_active_ms: int, now_ms: int, tick_interval: float) -> int:
    """Whole ticks between two wall-clock times. Negative if time went backwards."""
    return int((now_ms - last_active_ms) // (tick_interval * 1000))


def catch_up(engine: PetEngine, now_ms: int | None = None) -> int:
    """Run the missed ticks through ``engine.tick()`` and return how many.

    One tick or less counts as continuous play and replays nothing. The
    replay is capped at ``config.max_offline_ticks``; time beyond the cap
    is dropped. ``last_active`` is set to *now_ms* afterwards either way.
    """
    now = engine.clock.now_ms() if now_ms is None else now_ms
    cfg = engine.config
    elapsed = elapsed_ticks(engine.state.last_active, now, cfg.tick_interval)

    replayed = 0
    if elapsed > 1:
        replayed = min(elapsed, cfg.max_offline_ticks)
        logger.info("Replaying %d offline ticks (%d elapsed)", replayed, elapsed)
        for _ in range(replayed):
            engine.tick()
        engine.signals.publish(Signal.CAUGHT_UP, ticks=replayed, elapsed=elapsed)
        engine.signals.flush()

    engine.state.last_active = now
    return replayed
