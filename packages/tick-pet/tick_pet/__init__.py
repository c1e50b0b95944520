"""tick-pet - A virtual pet simulation on a fixed one-second tick."""
from __future__ import annotations

from tick_pet.clock import ManualClock, SystemClock, TimeSource
from tick_pet.commands import Clean, CommandQueue, Feed, Play, Reset, Revive, Sleep
from tick_pet.config import PetConfig, load_config
from tick_pet.engine import PetEngine
from tick_pet.evolution import EvolutionStateMachine, Transition, grade, next_stage
from tick_pet.inbox import AppNotification, NotificationInbox
from tick_pet.notify import InboxNotifier, NotificationPolicy, Notifier, NullNotifier
from tick_pet.offline import catch_up
from tick_pet.signals import SignalBus
from tick_pet.state import CreatureState, restore_state, snapshot_state
from tick_pet.storage import JsonFileStore, MemoryStore, SnapshotStore
from tick_pet.timers import TimerQueue
from tick_pet.types import (
    Activity,
    Category,
    EvolutionType,
    LifeStage,
    Mood,
    NotificationCapability,
    NotificationError,
    Signal,
    SnapshotError,
)

__all__ = [
    "PetEngine", "PetConfig", "load_config",
    "CreatureState", "snapshot_state", "restore_state",
    "EvolutionStateMachine", "Transition", "grade", "next_stage",
    "catch_up",
    "NotificationPolicy", "Notifier", "NullNotifier", "InboxNotifier",
    "NotificationInbox", "AppNotification",
    "TimerQueue", "SignalBus", "Signal",
    "CommandQueue", "Feed", "Play", "Sleep", "Clean", "Revive", "Reset",
    "SnapshotStore", "MemoryStore", "JsonFileStore",
    "TimeSource", "SystemClock", "ManualClock",
    "LifeStage", "EvolutionType", "Category", "Mood", "Activity",
    "NotificationCapability", "SnapshotError", "NotificationError",
]
