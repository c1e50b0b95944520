"""CreatureState - the single mutable aggregate, plus its snapshot format."""
from __future__ import annotations

import dataclasses
import logging
import math
from dataclasses import dataclass
from typing import Any

from tick_pet.config import PetConfig
from tick_pet.types import EvolutionType, LifeStage

logger = logging.getLogger(__name__)

_SNAPSHOT_VERSION = 1

STAT_MAX = 100.0
BOUNDED_STATS = ("hunger", "happiness", "health", "energy")


@dataclass
class CreatureState:
    hunger: float = STAT_MAX
    happiness: float = STAT_MAX
    health: float = STAT_MAX
    energy: float = STAT_MAX
    age: int = 0
    life_stage: LifeStage = LifeStage.EGG
    evolution_type: EvolutionType = EvolutionType.NORMAL
    is_alive: bool = True
    is_sleeping: bool = False
    poop_count: int = 0
    total_care_score: float = 0.0
    care_samples: int = 0
    last_active: int = 0


def clamp(value: float, low: float = 0.0, high: float = STAT_MAX) -> float:
    return max(low, min(value, high))


def fresh_state(now_ms: int) -> CreatureState:
    """A brand-new egg, last seen at *now_ms*."""
    return CreatureState(last_active=now_ms)


def snapshot_state(state: CreatureState) -> dict[str, Any]:
    """Flat JSON-compatible record of every CreatureState field."""
    data = dataclasses.asdict(state)
    data["life_stage"] = state.life_stage.value
    data["evolution_type"] = state.evolution_type.value
    return {"version": _SNAPSHOT_VERSION, **data}


def restore_state(
    data: dict[str, Any], now_ms: int, config: PetConfig | None = None,
) -> CreatureState:
    """Rebuild a CreatureState from *data*, one field at a time.

    Anything missing falls back to the fresh-egg value silently. Anything
    present but unusable falls back too, and anything out of range is
    clamped, each with a warning. Never raises on malformed content.
    """
    config = config or PetConfig()
    state = fresh_state(now_ms)
    if not isinstance(data, dict):
        logger.warning("Snapshot is %s, not a mapping; starting fresh",
                       type(data).__name__)
        return state

    version = data.get("version", _SNAPSHOT_VERSION)
    if version != _SNAPSHOT_VERSION:
        logger.warning("Snapshot version %r, expected %d; restoring what fits",
                       version, _SNAPSHOT_VERSION)

    for name in BOUNDED_STATS:
        value = _number(data, name)
        if value is not None:
            setattr(state, name, _clamped(name, value, 0.0, STAT_MAX))

    age = _integer(data, "age")
    if age is not None:
        if age < 0:
            _bad("age", age)
        else:
            state.age = age

    poop = _integer(data, "poop_count")
    if poop is not None:
        state.poop_count = int(_clamped("poop_count", poop, 0, config.max_poop))

    samples = _integer(data, "care_samples")
    total = _number(data, "total_care_score")
    if samples is not None and samples >= 0 and total is not None and total >= 0:
        state.care_samples = samples
        state.total_care_score = total
    elif samples is not None or total is not None:
        # The pair only means something together.
        _bad("care_samples/total_care_score", (samples, total))

    last_active = _integer(data, "last_active")
    if last_active is not None:
        state.last_active = last_active

    for name in ("is_alive", "is_sleeping"):
        if name in data and data[name] is not None:
            if isinstance(data[name], bool):
                setattr(state, name, data[name])
            else:
                _bad(name, data[name])

    state.life_stage = _enum(data, "life_stage", LifeStage, state.life_stage)
    state.evolution_type = _enum(
        data, "evolution_type", EvolutionType, state.evolution_type,
    )
    return state


def _bad(name: str, value: Any) -> None:
    logger.warning("Ignoring unusable snapshot field %s=%r", name, value)


def _clamped(name: str, value: float, low: float, high: float) -> float:
    fixed = max(low, min(value, high))
    if fixed != value:
        logger.warning("Clamping snapshot field %s=%r to %r", name, value, fixed)
    return fixed


def _number(data: dict[str, Any], name: str) -> float | None:
    value = data.get(name)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        _bad(name, value)
        return None
    try:
        number = float(value)
    except OverflowError:
        number = math.inf
    if not math.isfinite(number):
        _bad(name, value)
        return None
    return number


def _integer(data: dict[str, Any], name: str) -> int | None:
    value = data.get(name)
    if value is None:
        return None
    if isinstance(value, bool):
        _bad(name, value)
        return None
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if not isinstance(value, int):
        _bad(name, value)
        return None
    return value


def _enum(data: dict[str, Any], name: str, etype: type, default: Any) -> Any:
    value = data.get(name)
    if value is None:
        return default
    try:
        return etype(value)
    except ValueError:
        _bad(name, value)
        return default
