"""Notification gating: capability port, per-category cooldowns, triggers."""
from __future__ import annotations

import logging
from typing import Any, Protocol, runtime_checkable

from tick_pet.clock import TimeSource
from tick_pet.config import PetConfig
from tick_pet.inbox import NotificationInbox
from tick_pet.state import CreatureState
from tick_pet.types import Category, NotificationCapability, NotificationError

logger = logging.getLogger(__name__)


@runtime_checkable
class Notifier(Protocol):
    """Platform delivery capability. Permission prompts live behind it."""

    def capability(self) -> NotificationCapability:
        ...

    def request_permission(self) -> NotificationCapability:
        ...

    def deliver(self, category: Category, title: str, body: str) -> None:
        """Show one notification. May raise NotificationError."""
        ...


class NullNotifier:
    """A platform with no notification support. Every call is a no-op."""

    def capability(self) -> NotificationCapability:
        return NotificationCapability.UNSUPPORTED

    def request_permission(self) -> NotificationCapability:
        return NotificationCapability.UNSUPPORTED

    def deliver(self, category: Category, title: str, body: str) -> None:
        pass


class InboxNotifier:
    """Delivers into a NotificationInbox.

    Starts ``unrequested`` unless told otherwise; ``grant`` decides what a
    permission request resolves to. Expired entries are pruned on every
    delivery.
    """

    def __init__(self, inbox: NotificationInbox, clock: TimeSource,
                 capability: NotificationCapability = NotificationCapability.UNREQUESTED,
                 grant: bool = True) -> None:
        self._inbox = inbox
        self._clock = clock
        self._capability = capability
        self._grant = grant

    def capability(self) -> NotificationCapability:
        return self._capability

    def request_permission(self) -> NotificationCapability:
        if self._capability is NotificationCapability.UNREQUESTED:
            self._capability = (
                NotificationCapability.GRANTED if self._grant
                else NotificationCapability.DENIED
            )
        return self._capability

    def deliver(self, category: Category, title: str, body: str) -> None:
        now = self._clock.now_ms()
        self._inbox.prune(now)
        self._inbox.add(category, title, body, now)


class NotificationPolicy:
    """At most one delivery per category per cooldown window.

    Sends inside the window are dropped, not queued. Categories that have
    never been sent are always eligible.
    """

    def __init__(self, notifier: Notifier, clock: TimeSource,
                 config: PetConfig | None = None) -> None:
        self._notifier = notifier
        self._clock = clock
        self._config = config or PetConfig()
        self._last_sent: dict[Category, int] = {}

    @property
    def enabled(self) -> bool:
        return self._notifier.capability() is NotificationCapability.GRANTED

    def request_permission(self) -> bool:
        """Ask the platform once. Granted/denied/unsupported are final answers."""
        if self._notifier.capability() is NotificationCapability.UNREQUESTED:
            result = self._notifier.request_permission()
            logger.info("Notification permission: %s", result.value)
        return self.enabled

    def last_sent(self, category: Category) -> int | None:
        return self._last_sent.get(category)

    def send(self, category: Category, title: str, body: str,
             cooldown_ms: int | None = None) -> bool:
        """Deliver unless disabled or cooling down. Returns True if delivered."""
        if not self.enabled:
            return False
        if cooldown_ms is None:
            cooldown_ms = self._config.notification_cooldown_ms
        now = self._clock.now_ms()
        last = self._last_sent.get(category)
        if last is not None and now - last < cooldown_ms:
            logger.debug("Dropping %s notification, %d ms into cooldown",
                         category.value, now - last)
            return False
        try:
            self._notifier.deliver(category, title, body)
        except NotificationError as exc:
            logger.warning("Could not deliver %s notification: %s", category.value, exc)
            return False
        self._last_sent[category] = now
        return True

    def evaluate(self, state: CreatureState) -> list[Category]:
        """Level-triggered checks for one pass. Returns what was delivered.

        Death is checked first and suppresses everything else. The other
        categories are independent of each other.
        """
        cfg = self._config
        sent: list[Category] = []

        if not state.is_alive:
            if self.send(Category.DEAD, "Your Pet Passed Away",
                         "Your pet needs you to revive them!"):
                sent.append(Category.DEAD)
            return sent

        checks = (
            (state.health < cfg.health_low, Category.SICK,
             "Your Pet is Sick!",
             f"Health: {round(state.health)}% - Please take care!"),
            (state.hunger < cfg.hunger_high, Category.HUNGRY,
             "Your Pet is Hungry!",
             f"Hunger: {round(state.hunger)}% - Time to feed!"),
            (state.energy < cfg.energy_low and not state.is_sleeping, Category.SLEEPY,
             "Your Pet is Sleepy",
             f"Energy: {round(state.energy)}% - Let them rest!"),
            (state.happiness < cfg.happiness_low, Category.SAD,
             "Your Pet is Sad",
             f"Happiness: {round(state.happiness)}% - Play with them!"),
            (state.poop_count >= cfg.dirty_threshold, Category.DIRTY,
             "Your Pet Needs Cleaning!",
             f"{state.poop_count} poop(s) - Clean up time!"),
        )
        for triggered, category, title, body in checks:
            if triggered and self.send(category, title, body):
                sent.append(category)
        return sent

    def snapshot(self) -> dict[str, Any]:
        return {c.value: ts for c, ts in self._last_sent.items()}

    def restore(self, data: dict[str, Any]) -> None:
        self._last_sent.clear()
        for key, ts in data.items():
            try:
                category = Category(key)
            except ValueError:
                logger.warning("Ignoring cooldown for unknown category %r", key)
                continue
            if isinstance(ts, int) and not isinstance(ts, bool):
                self._last_sent[category] = ts
