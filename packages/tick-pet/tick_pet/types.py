"""Shared enums and error types for the pet simulation."""
from __future__ import annotations

from enum import Enum


class LifeStage(str, Enum):
    """Ordered life stages. Order of declaration is the order of growth."""

    EGG = "egg"
    BABY = "baby"
    CHILD = "child"
    ADULT = "adult"
    ELDER = "elder"


class EvolutionType(str, Enum):
    """Care grade fixed at each stage transition."""

    PERFECT = "perfect"
    GOOD = "good"
    NORMAL = "normal"
    BAD = "bad"


class Category(str, Enum):
    """Notification categories, one cooldown slot each."""

    HUNGRY = "hungry"
    SICK = "sick"
    SLEEPY = "sleepy"
    SAD = "sad"
    DIRTY = "dirty"
    DEAD = "dead"
    EVOLVED = "evolved"


class Mood(str, Enum):
    DEAD = "dead"
    SICK = "sick"
    DIRTY = "dirty"
    SLEEPY = "sleepy"
    SAD = "sad"
    HUNGRY = "hungry"
    HAPPY = "happy"
    NORMAL = "normal"


class Activity(str, Enum):
    """Short-lived busy state shown while an action animates."""

    IDLE = "idle"
    EATING = "eating"
    PLAYING = "playing"


class NotificationCapability(str, Enum):
    UNSUPPORTED = "unsupported"
    UNREQUESTED = "unrequested"
    GRANTED = "granted"
    DENIED = "denied"


class Signal(str, Enum):
    """Things the engine tells the presentation layer about."""

    EVOLVED = "evolved"
    DIED = "died"
    WOKE = "woke"
    POOP = "poop"
    ACTION = "action"
    REVIVED = "revived"
    RESET = "reset"
    CAUGHT_UP = "caught_up"


class SnapshotError(Exception):
    """Raised when a persisted snapshot cannot be read at all."""


class NotificationError(Exception):
    """Raised by a notifier when the platform refuses a delivery."""
