"""Simulation tunables."""
from __future__ import annotations

import dataclasses
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class PetConfig:
    """Immutable tuning table for the pet simulation.

    Ages are counted in ticks, durations in milliseconds of wall-clock time.

    Attributes:
        egg_hatch: Age at which the egg hatches into a baby.
        baby_evolve: Age at which a baby becomes a child.
        child_evolve: Age at which a child becomes an adult.
        adult_evolve: Age at which an adult becomes an elder.
        care_sample_interval: Care score is sampled when ``age`` is a
            multiple of this value.
        max_offline_ticks: Upper bound on ticks replayed after an absence.
        tick_interval: Seconds of real time per tick in the paced loop.
    """

    egg_hatch: int = 30
    baby_evolve: int = 90
    child_evolve: int = 210
    adult_evolve: int = 390

    hunger_decay: float = 0.5
    happiness_decay: float = 0.3
    energy_decay: float = 0.2
    health_decay: float = 1.0
    health_regen: float = 0.5

    hunger_low: float = 20.0
    hunger_high: float = 30.0
    happiness_low: float = 20.0
    happiness_high: float = 70.0
    energy_low: float = 10.0
    health_low: float = 30.0
    health_critical: float = 0.0

    care_sample_interval: int = 10
    perfect_min: float = 90.0
    good_min: float = 70.0
    normal_min: float = 50.0

    feed_hunger: float = 30.0
    feed_happiness: float = 5.0
    play_happiness: float = 25.0
    play_hunger_cost: float = 10.0
    clean_happiness: float = 10.0
    action_duration_ms: int = 2000
    hatch_animation_ms: int = 2000

    max_poop: int = 8
    poop_chance: float = 0.02
    poop_happiness_penalty: float = 5.0
    dirty_threshold: int = 2

    sleep_energy_recovery: float = 2.0

    max_offline_ticks: int = 3600
    tick_interval: float = 1.0

    notification_cooldown_ms: int = 60_000
    evolved_cooldown_ms: int = 300_000

    def __post_init__(self) -> None:
        if not 0 < self.egg_hatch < self.baby_evolve < self.child_evolve < self.adult_evolve:
            raise ValueError(
                "growth thresholds must be positive and strictly increasing, got "
                f"{self.egg_hatch}/{self.baby_evolve}/{self.child_evolve}/{self.adult_evolve}"
            )
        if self.care_sample_interval <= 0:
            raise ValueError(
                f"care_sample_interval must be positive, got {self.care_sample_interval}"
            )
        if not self.perfect_min > self.good_min > self.normal_min:
            raise ValueError("grade thresholds must satisfy perfect > good > normal")
        if not 0.0 <= self.poop_chance <= 1.0:
            raise ValueError(f"poop_chance must be in [0, 1], got {self.poop_chance}")
        if self.max_poop <= 0:
            raise ValueError(f"max_poop must be positive, got {self.max_poop}")
        if self.max_offline_ticks < 0:
            raise ValueError(
                f"max_offline_ticks must be >= 0, got {self.max_offline_ticks}"
            )
        if self.tick_interval <= 0:
            raise ValueError("tick_interval must be positive")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PetConfig:
        """Build a config from a partial mapping. Unknown keys are an error."""
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(unknown)}")
        return cls(**data)

    def to_dict(self) -> dict[str, Any]:
        return dataclasses.asdict(self)


def load_config(path: str | Path) -> PetConfig:
    """Read a JSON object of overrides from *path*."""
    with open(path, encoding="utf-8") as fh:
        data = json.load(fh)
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a JSON object")
    return PetConfig.from_dict(data)
