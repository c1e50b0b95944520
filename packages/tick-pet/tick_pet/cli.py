"""tick-pet - look after a pet from the terminal.

Loads the pet from a JSON snapshot, replays the time spent away, applies
any requested actions, optionally keeps it running, and saves it again.

Run:
    tick-pet --state pet.json --feed
    tick-pet --state pet.json --ticks 600 --seed 7
    tick-pet --state pet.json --realtime      # Ctrl-C to stop
"""
from __future__ import annotations

import argparse
import logging
import signal as _signal
import sys
from pathlib import Path
from typing import Sequence

from tick_pet.clock import SystemClock, TimeSource
from tick_pet.config import PetConfig, load_config
from tick_pet.engine import PetEngine
from tick_pet.inbox import NotificationInbox
from tick_pet.notify import InboxNotifier
from tick_pet.storage import JsonFileStore
from tick_pet.types import NotificationCapability, Signal

DEFAULT_STATE = Path.home() / ".tick-pet" / "state.json"

# Applied in this order, after catch-up.
_ACTIONS = ("revive", "reset", "clean", "feed", "play", "sleep")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="tick-pet", description="Virtual pet on a one-second tick")
    p.add_argument("--state", type=Path, default=DEFAULT_STATE, metavar="FILE",
                   help=f"Snapshot file (default: {DEFAULT_STATE})")
    p.add_argument("--config", type=Path, default=None, metavar="FILE",
                   help="JSON file of PetConfig overrides")
    p.add_argument("--seed", type=int, default=None, help="RNG seed for mess spawning")
    mode = p.add_mutually_exclusive_group()
    mode.add_argument("--ticks", type=int, default=0,
                      help="Run this many ticks immediately, unpaced (default: 0)")
    mode.add_argument("--realtime", action="store_true",
                      help="Keep ticking once per interval until interrupted")
    for name in _ACTIONS:
        p.add_argument(f"--{name}", action="store_true", help=f"{name.capitalize()} the pet")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = p.parse_args(argv)
    if args.ticks < 0:
        p.error("--ticks must be >= 0")
    return args


def status_line(engine: PetEngine) -> str:
    s = engine.state
    if not s.is_alive:
        return f"{s.life_stage.value} (age {s.age}) has died. Try --revive."
    line = (f"{s.life_stage.value}/{s.evolution_type.value} age={s.age} "
            f"mood={engine.mood.value} hunger={s.hunger:.0f} happiness={s.happiness:.0f} "
            f"health={s.health:.0f} energy={s.energy:.0f} poop={s.poop_count}")
    if s.is_sleeping:
        line += " (asleep)"
    return line


def build_engine(args: argparse.Namespace, clock: TimeSource | None = None,
                 inbox: NotificationInbox | None = None) -> PetEngine:
    config = load_config(args.config) if args.config else PetConfig()
    clock = clock or SystemClock()
    notifier = InboxNotifier(
        inbox if inbox is not None else NotificationInbox(), clock,
        capability=NotificationCapability.GRANTED,
    )
    return PetEngine(config=config, clock=clock, seed=args.seed,
                     store=JsonFileStore(args.state), notifier=notifier)


def main(argv: Sequence[str] | None = None, clock: TimeSource | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    inbox = NotificationInbox()
    engine = build_engine(args, clock, inbox)

    def _announce(signal: Signal, data: dict) -> None:
        if signal is Signal.EVOLVED:
            print(f"* evolved into {data['new']} ({data['evolution_type']})")
        elif signal is Signal.DIED:
            print(f"* died at age {data['age']}")
        elif signal is Signal.CAUGHT_UP:
            print(f"* {data['ticks']} ticks passed while you were away")

    engine.signals.subscribe(None, _announce)

    engine.start()

    for name in _ACTIONS:
        if getattr(args, name):
            accepted = getattr(engine, name)()
            if not accepted:
                print(f"! {name} had no effect")

    if args.realtime:
        previous = _signal.signal(_signal.SIGINT, lambda *_: engine.request_stop())
        try:
            engine.run_forever()
        finally:
            _signal.signal(_signal.SIGINT, previous)
    else:
        engine.run(args.ticks)
        engine.save()

    inbox.prune(engine.clock.now_ms())
    for note in reversed(inbox.items()):
        print(f"[{note.category.value}] {note.title} {note.message}")
    print(status_line(engine))
    return 0


if __name__ == "__main__":
    sys.exit(main())
