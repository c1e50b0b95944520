"""Life-stage progression and care grading."""
from __future__ import annotations

from typing import NamedTuple

from tick_pet.config import PetConfig
from tick_pet.state import BOUNDED_STATS, CreatureState
from tick_pet.types import EvolutionType, LifeStage

STAGES: tuple[LifeStage, ...] = tuple(LifeStage)


class Transition(NamedTuple):
    old: LifeStage
    new: LifeStage
    grade: EvolutionType


def next_stage(stage: LifeStage) -> LifeStage | None:
    """The stage after *stage*, or None at the end of the line."""
    idx = STAGES.index(stage)
    if idx + 1 < len(STAGES):
        return STAGES[idx + 1]
    return None


def stage_index(stage: LifeStage) -> int:
    return STAGES.index(stage)


def evolution_threshold(stage: LifeStage, config: PetConfig) -> int | None:
    """Age at which a hatched creature leaves *stage*. None for egg and elder."""
    return {
        LifeStage.BABY: config.baby_evolve,
        LifeStage.CHILD: config.child_evolve,
        LifeStage.ADULT: config.adult_evolve,
    }.get(stage)


def care_score(state: CreatureState) -> float:
    """Mean of the four bounded vitals."""
    return sum(getattr(state, name) for name in BOUNDED_STATS) / len(BOUNDED_STATS)


def sample_care(state: CreatureState) -> None:
    state.total_care_score += care_score(state)
    state.care_samples += 1


def average_care(state: CreatureState) -> float | None:
    if state.care_samples == 0:
        return None
    return state.total_care_score / state.care_samples


def grade(average: float | None, config: PetConfig) -> EvolutionType:
    """Bucket an average care score. Lower bounds are inclusive."""
    if average is None:
        return EvolutionType.NORMAL
    if average >= config.perfect_min:
        return EvolutionType.PERFECT
    if average >= config.good_min:
        return EvolutionType.GOOD
    if average >= config.normal_min:
        return EvolutionType.NORMAL
    return EvolutionType.BAD


class EvolutionStateMachine:
    """Moves a creature one stage forward and grades how it was raised.

    Stages only ever advance. Going back to ``egg`` is the engine's
    business (revive/reset), never this class's.
    """

    def __init__(self, config: PetConfig) -> None:
        self._config = config

    def due(self, state: CreatureState) -> bool:
        """True when *state* has reached the age that ends its stage."""
        if state.life_stage is LifeStage.EGG:
            return state.age >= self._config.egg_hatch
        threshold = evolution_threshold(state.life_stage, self._config)
        return threshold is not None and state.age >= threshold

    def evolve(self, state: CreatureState) -> Transition | None:
        new = next_stage(state.life_stage)
        if new is None:
            return None
        old = state.life_stage
        state.evolution_type = grade(average_care(state), self._config)
        state.life_stage = new
        return Transition(old, new, state.evolution_type)
