"""PetEngine - owns the creature, advances it, and runs the live loop."""
from __future__ import annotations

import logging
import os
import random
from typing import Any, Callable

from tick_pet.clock import SystemClock, TimeSource
from tick_pet.commands import Clean, CommandQueue, Feed, Play, Reset, Revive, Sleep
from tick_pet.config import PetConfig
from tick_pet.evolution import EvolutionStateMachine, Transition, sample_care
from tick_pet.notify import NotificationPolicy, Notifier, NullNotifier
from tick_pet.offline import catch_up
from tick_pet.signals import SignalBus
from tick_pet.state import (
    STAT_MAX,
    CreatureState,
    clamp,
    fresh_state,
    restore_state,
    snapshot_state,
)
from tick_pet.storage import MemoryStore, SnapshotStore
from tick_pet.timers import TimerQueue
from tick_pet.types import Activity, Category, LifeStage, Mood, Signal, SnapshotError

logger = logging.getLogger(__name__)

HATCH_TIMER = "hatching"
ACTION_TIMER = "action"

# Longest the live loop sleeps before looking at the command queue again.
_MAX_IDLE_MS = 100


class PetEngine:
    """One running simulation of one creature.

    All mutation goes through this object: ``tick()`` and the action
    methods when driven from a single thread, or ``submit()`` plus
    ``run()``/``run_forever()`` when commands arrive from elsewhere. In the
    latter case commands are applied strictly between ticks.

    Args:
        config: Tuning table. Defaults to ``PetConfig()``.
        clock: Wall-clock source. Defaults to the system clock.
        seed: Seed for the mess-spawn RNG. Random when omitted.
        store: Where snapshots are loaded from and saved to.
        notifier: Platform notification capability.
        should_notify: Asked once per qualifying tick whether the
            threshold notifications should be evaluated right now.
    """

    def __init__(
        self,
        config: PetConfig | None = None,
        clock: TimeSource | None = None,
        seed: int | None = None,
        store: SnapshotStore | None = None,
        notifier: Notifier | None = None,
        should_notify: Callable[[], bool] | None = None,
    ) -> None:
        self._config = config or PetConfig()
        self._clock = clock or SystemClock()
        if seed is None:
            seed = int.from_bytes(os.urandom(8), "big")
        self._seed = seed
        self._rng = random.Random(seed)
        self._store = store if store is not None else MemoryStore()
        self._policy = NotificationPolicy(
            notifier or NullNotifier(), self._clock, self._config,
        )
        self._should_notify = should_notify or (lambda: True)

        self._state = fresh_state(self._clock.now_ms())
        self._evolution = EvolutionStateMachine(self._config)
        self._timers = TimerQueue(self._clock)
        self._bus = SignalBus()
        self._is_hatching = False
        self._activity = Activity.IDLE

        self._commands = CommandQueue()
        self._commands.handle(Feed, lambda cmd: self.feed())
        self._commands.handle(Play, lambda cmd: self.play())
        self._commands.handle(Sleep, lambda cmd: self.sleep())
        self._commands.handle(Clean, lambda cmd: self.clean())
        self._commands.handle(Revive, lambda cmd: self.revive())
        self._commands.handle(Reset, lambda cmd: self.reset())

        self._tick_hooks: list[Callable[[PetEngine], None]] = []
        self._stop_requested = False

    # -- Accessors --

    @property
    def config(self) -> PetConfig:
        return self._config

    @property
    def clock(self) -> TimeSource:
        return self._clock

    @property
    def seed(self) -> int:
        return self._seed

    @property
    def state(self) -> CreatureState:
        return self._state

    @property
    def signals(self) -> SignalBus:
        return self._bus

    @property
    def timers(self) -> TimerQueue:
        return self._timers

    @property
    def notifications(self) -> NotificationPolicy:
        return self._policy

    @property
    def is_hatching(self) -> bool:
        return self._is_hatching

    @property
    def activity(self) -> Activity:
        return self._activity

    @property
    def mood(self) -> Mood:
        s, cfg = self._state, self._config
        if not s.is_alive:
            return Mood.DEAD
        if s.health < cfg.health_low:
            return Mood.SICK
        if s.poop_count >= cfg.dirty_threshold:
            return Mood.DIRTY
        if s.energy < cfg.energy_low:
            return Mood.SLEEPY
        if s.happiness < cfg.happiness_low:
            return Mood.SAD
        if s.hunger < cfg.hunger_high:
            return Mood.HUNGRY
        if s.happiness > cfg.happiness_high:
            return Mood.HAPPY
        return Mood.NORMAL

    def on_tick(self, hook: Callable[[PetEngine], None]) -> None:
        """Call *hook(engine)* after every live tick."""
        self._tick_hooks.append(hook)

    # -- Simulation --

    def tick(self) -> None:
        """Advance the creature by exactly one tick.

        A dead creature is left untouched. Signals raised during the tick
        are flushed once the tick has fully applied.
        """
        if not self._state.is_alive:
            return
        self._advance()
        self._bus.flush()

    def _advance(self) -> None:
        s, cfg = self._state, self._config

        if s.life_stage is LifeStage.EGG:
            # Incubating: only age moves.
            if self._evolution.due(s):
                self.evolve()
            s.age += 1
            return

        if s.is_sleeping:
            s.energy = clamp(s.energy + cfg.sleep_energy_recovery)
            s.health = clamp(s.health + cfg.health_regen)
            if s.energy >= STAT_MAX:
                s.is_sleeping = False
                self._bus.publish(Signal.WOKE, age=s.age)
            s.age += 1
            return

        s.hunger = clamp(s.hunger - cfg.hunger_decay)
        s.happiness = clamp(s.happiness - cfg.happiness_decay)
        s.energy = clamp(s.energy - cfg.energy_decay)

        if s.age % cfg.care_sample_interval == 0:
            sample_care(s)

        if (s.hunger < cfg.hunger_low
                or s.happiness < cfg.happiness_low
                or s.energy < cfg.energy_low):
            s.health = clamp(s.health - cfg.health_decay)
        else:
            s.health = clamp(s.health + cfg.health_regen)

        if (s.age > cfg.egg_hatch
                and s.poop_count < cfg.max_poop
                and self._rng.random() < cfg.poop_chance):
            s.poop_count += 1
            s.happiness = clamp(s.happiness - cfg.poop_happiness_penalty)
            self._bus.publish(Signal.POOP, count=s.poop_count)

        if s.poop_count >= cfg.max_poop:
            s.health = clamp(s.health - cfg.health_decay)

        s.age += 1

        if self._evolution.due(s):
            self.evolve()

        if s.health <= cfg.health_critical:
            s.is_alive = False
            s.is_sleeping = False
            logger.info("Creature died at age %d (%s)", s.age, s.life_stage.value)
            self._bus.publish(Signal.DIED, age=s.age, life_stage=s.life_stage.value)

        if self._should_notify():
            self._policy.evaluate(s)

    def evolve(self) -> Transition | None:
        """Move to the next life stage. No-op for an elder or a dead creature."""
        if not self._state.is_alive:
            return None
        transition = self._evolution.evolve(self._state)
        if transition is None:
            return None
        self._is_hatching = True
        self._timers.schedule(
            HATCH_TIMER, self._config.hatch_animation_ms, self._end_hatching,
        )
        logger.info("Evolved %s -> %s (%s)", transition.old.value,
                    transition.new.value, transition.grade.value)
        self._bus.publish(
            Signal.EVOLVED,
            old=transition.old.value,
            new=transition.new.value,
            evolution_type=transition.grade.value,
        )
        stage = transition.new.value
        self._policy.send(
            Category.EVOLVED,
            f"Your Pet Evolved to {stage.capitalize()}!",
            f"Great job! Your pet is now a {stage}!",
            self._config.evolved_cooldown_ms,
        )
        return transition

    def _end_hatching(self) -> None:
        self._is_hatching = False

    def _begin_activity(self, activity: Activity) -> None:
        self._activity = activity
        self._timers.schedule(
            ACTION_TIMER, self._config.action_duration_ms, self._end_activity,
        )

    def _end_activity(self) -> None:
        self._activity = Activity.IDLE

    # -- Actions --
    # Each returns whether it was applied. A failed precondition is a
    # normal outcome, not an error.

    def feed(self) -> bool:
        s, cfg = self._state, self._config
        if not s.is_alive:
            return False
        s.hunger = clamp(s.hunger + cfg.feed_hunger)
        s.happiness = clamp(s.happiness + cfg.feed_happiness)
        self._begin_activity(Activity.EATING)
        self._publish_action("feed")
        return True

    def play(self) -> bool:
        s, cfg = self._state, self._config
        if not s.is_alive or s.is_sleeping or s.hunger < cfg.hunger_low:
            return False
        s.happiness = clamp(s.happiness + cfg.play_happiness)
        s.hunger = clamp(s.hunger - cfg.play_hunger_cost)
        self._begin_activity(Activity.PLAYING)
        self._publish_action("play")
        return True

    def sleep(self) -> bool:
        """Toggle sleep."""
        s = self._state
        if not s.is_alive:
            return False
        s.is_sleeping = not s.is_sleeping
        self._publish_action("sleep" if s.is_sleeping else "wake")
        return True

    def clean(self) -> bool:
        s = self._state
        if not s.is_alive:
            return False
        s.poop_count = 0
        s.happiness = clamp(s.happiness + self._config.clean_happiness)
        self._publish_action("clean")
        return True

    def revive(self) -> bool:
        """Start over as a fresh egg. Allowed whether or not the pet is alive."""
        self._replace_state(fresh_state(self._state.last_active))
        self._bus.publish(Signal.REVIVED)
        self._bus.flush()
        return True

    def reset(self) -> bool:
        """Like ``revive`` but also forgets the saved snapshot."""
        self._store.clear()
        self._replace_state(fresh_state(self._clock.now_ms()))
        self._bus.publish(Signal.RESET)
        self._bus.flush()
        return True

    def _replace_state(self, state: CreatureState) -> None:
        self._state = state
        self._timers.cancel_all()
        self._is_hatching = False
        self._activity = Activity.IDLE

    def _publish_action(self, name: str) -> None:
        self._bus.publish(Signal.ACTION, action=name)
        self._bus.flush()

    def submit(self, cmd: Any) -> None:
        """Queue a command for the loop to apply before its next tick."""
        self._commands.enqueue(cmd)

    def process_commands(self) -> list[tuple[Any, bool]]:
        results = self._commands.drain()
        for cmd, accepted in results:
            if not accepted:
                logger.debug("Ignored %s", type(cmd).__name__)
        return results

    # -- Notifications --

    @property
    def notifications_enabled(self) -> bool:
        return self._policy.enabled

    def request_notification_permission(self) -> bool:
        return self._policy.request_permission()

    # -- Persistence --

    def snapshot(self) -> dict[str, Any]:
        return snapshot_state(self._state)

    def restore(self, data: dict[str, Any]) -> None:
        self._replace_state(restore_state(data, self._clock.now_ms(), self._config))

    def save(self) -> None:
        self._store.save(self.snapshot())

    def load(self) -> bool:
        """Replace the state with the stored snapshot. False if there was none."""
        try:
            data = self._store.load()
        except SnapshotError as exc:
            logger.warning("Discarding unreadable snapshot: %s", exc)
            return False
        if data is None:
            return False
        self.restore(data)
        return True

    def start(self) -> int:
        """Load whatever was saved and replay the time spent away."""
        self.load()
        return catch_up(self)

    def suspend(self) -> None:
        """The consuming surface went to the background."""
        self.save()

    def resume(self) -> int:
        """The consuming surface came back. Returns the ticks replayed."""
        replayed = 0
        if self.load():
            replayed = catch_up(self)
        self._state.last_active = self._clock.now_ms()
        return replayed

    # -- Loop --

    def request_stop(self) -> None:
        """Ask the running loop to exit after the current tick."""
        self._stop_requested = True

    def _live_tick(self) -> None:
        self.tick()
        self._state.last_active = self._clock.now_ms()
        for hook in self._tick_hooks:
            hook(self)

    def run(self, n: int) -> None:
        """Run *n* ticks back to back, applying queued commands before each."""
        self._stop_requested = False
        for _ in range(n):
            self.process_commands()
            self._live_tick()
            self._timers.poll()
            if self._stop_requested:
                break

    def run_forever(self) -> None:
        """Tick once per ``tick_interval`` until ``request_stop()``.

        Commands and cosmetic timers are serviced between ticks. If the
        process was stalled for more than one interval the gap is replayed
        through offline catch-up. The state is saved on the way out.
        """
        self._stop_requested = False
        interval_ms = max(1, int(self._config.tick_interval * 1000))
        next_tick = self._clock.now_ms() + interval_ms
        try:
            while not self._stop_requested:
                self.process_commands()
                self._timers.poll()
                now = self._clock.now_ms()
                if now - next_tick > interval_ms:
                    catch_up(self, now)
                    next_tick = now + interval_ms
                    continue
                if now >= next_tick:
                    self._live_tick()
                    next_tick += interval_ms
                    continue
                wake = next_tick
                deadline = self._timers.next_deadline()
                if deadline is not None:
                    wake = min(wake, deadline)
                wait = max(1, min(wake - now, _MAX_IDLE_MS))
                self._clock.sleep(wait / 1000)
        finally:
            self.save()
