"""Tests for offline catch-up."""
from __future__ import annotations

from tick_pet import ManualClock, MemoryStore, PetConfig, PetEngine, Signal, catch_up
from tick_pet.offline import elapsed_ticks

START = 1_700_000_000_000


def make_engine(seed: int = 5, store=None, **overrides) -> PetEngine:
    config = PetConfig(**{"poop_chance": 0.3, **overrides})
    return PetEngine(config=config, clock=ManualClock(START), seed=seed, store=store)


def comparable(engine: PetEngine) -> dict:
    snap = engine.snapshot()
    snap.pop("last_active")
    return snap


def test_elapsed_ticks_floors():
    assert elapsed_ticks(0, 2999, 1.0) == 2
    assert elapsed_ticks(0, 3000, 1.0) == 3
    assert elapsed_ticks(0, 3000, 0.5) == 6


class TestCatchUp:
    def test_short_gap_is_continuous_play(self):
        """A gap of one tick or less replays nothing."""
        engine = make_engine()
        engine.clock.advance(1999)
        assert catch_up(engine) == 0
        assert engine.state.age == 0
        assert engine.state.last_active == START + 1999

    def test_two_seconds_is_an_absence(self):
        engine = make_engine()
        engine.clock.advance(2000)
        assert catch_up(engine) == 2
        assert engine.state.age == 2

    def test_clock_moved_backwards(self):
        """A clock that went backwards replays nothing but still resets last_active."""
        engine = make_engine()
        engine.clock.set(START - 60_000)
        assert catch_up(engine) == 0
        assert engine.state.age == 0
        assert engine.state.last_active == START - 60_000

    def test_matches_live_ticks(self):
        """Replayed ticks are the same ticks live play would have run."""
        offline = make_engine()
        live = make_engine()
        offline.clock.advance(500_000)
        assert catch_up(offline) == 500
        for _ in range(500):
            live.tick()
        assert comparable(offline) == comparable(live)

    def test_cap_discards_the_rest(self):
        """Time beyond the cap is lost, not carried into the next catch-up."""
        long_gone = make_engine()
        capped = make_engine()
        long_gone.clock.advance(10 * 3600 * 1000)
        capped.clock.advance(3600 * 1000)
        assert catch_up(long_gone) == 3600
        assert catch_up(capped) == 3600
        assert comparable(long_gone) == comparable(capped)
        assert long_gone.state.last_active == START + 10 * 3600 * 1000

    def test_custom_cap(self):
        engine = make_engine(max_offline_ticks=10)
        engine.clock.advance(60_000)
        assert catch_up(engine) == 10
        assert engine.state.age == 10

    def test_explicit_now(self):
        engine = make_engine()
        assert catch_up(engine, START + 45_000) == 45
        assert engine.state.last_active == START + 45_000

    def test_caught_up_signal(self):
        engine = make_engine()
        seen = []
        engine.signals.subscribe(Signal.CAUGHT_UP, lambda name, data: seen.append(data))
        engine.clock.advance(90_000)
        catch_up(engine)
        assert seen == [{"ticks": 90, "elapsed": 90}]


class TestEngineResume:
    def test_start_replays_since_last_save(self):
        store = MemoryStore()
        first = make_engine(store=store)
        first.run(10)
        first.save()

        second = make_engine(store=store)
        second.clock.advance(120_000)
        assert second.start() == 120
        assert second.state.age == 130

    def test_start_without_snapshot(self):
        engine = make_engine()
        assert engine.start() == 0
        assert engine.state.age == 0

    def test_suspend_and_resume(self):
        store = MemoryStore()
        engine = make_engine(store=store)
        engine.run(40)
        engine.suspend()
        engine.clock.advance(30_000)
        assert engine.resume() == 30
        assert engine.state.age == 70
        assert engine.state.last_active == START + 30_000

    def test_resume_without_snapshot_only_touches_timestamp(self):
        """With nothing saved, resuming just marks the pet as seen now."""
        engine = make_engine()
        engine.run(5)
        engine.clock.advance(30_000)
        assert engine.resume() == 0
        assert engine.state.age == 5
        assert engine.state.last_active == START + 30_000
