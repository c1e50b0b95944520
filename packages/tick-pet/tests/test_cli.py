"""Tests for the tick-pet command line."""
from __future__ import annotations

import json

import pytest

from tick_pet import ManualClock
from tick_pet.cli import main, parse_args

START = 1_700_000_000_000


def read(path) -> dict:
    return json.loads(path.read_text(encoding="utf-8"))


def test_runs_and_saves(tmp_path, capsys):
    state = tmp_path / "pet.json"
    assert main(["--state", str(state), "--ticks", "40", "--seed", "1"],
                clock=ManualClock(START)) == 0
    snap = read(state)
    assert snap["age"] == 40
    assert snap["life_stage"] == "baby"
    out = capsys.readouterr().out
    assert "* evolved into baby (normal)" in out
    assert "[evolved] Your Pet Evolved to Baby!" in out
    assert out.strip().splitlines()[-1].startswith("baby/normal age=40")


def test_second_run_catches_up(tmp_path, capsys):
    """The next invocation replays the time since the last save."""
    state = tmp_path / "pet.json"
    main(["--state", str(state), "--seed", "1"], clock=ManualClock(START))
    capsys.readouterr()
    main(["--state", str(state), "--seed", "1"], clock=ManualClock(START + 20_000))
    out = capsys.readouterr().out
    assert "* 20 ticks passed while you were away" in out
    assert read(state)["age"] == 20


def test_actions(tmp_path, capsys):
    state = tmp_path / "pet.json"
    state.write_text(json.dumps({"life_stage": "child", "age": 100, "hunger": 40.0,
                                 "last_active": START}), encoding="utf-8")
    main(["--state", str(state), "--feed"], clock=ManualClock(START))
    assert read(state)["hunger"] == 70.0


def test_rejected_action_reported(tmp_path, capsys):
    state = tmp_path / "pet.json"
    state.write_text(json.dumps({"is_alive": False, "age": 100, "life_stage": "adult",
                                 "last_active": START}), encoding="utf-8")
    main(["--state", str(state), "--feed"], clock=ManualClock(START))
    out = capsys.readouterr().out
    assert "! feed had no effect" in out
    assert "has died" in out


def test_config_file(tmp_path):
    state = tmp_path / "pet.json"
    config = tmp_path / "config.json"
    config.write_text(json.dumps({"egg_hatch": 5, "poop_chance": 0.0}), encoding="utf-8")
    main(["--state", str(state), "--config", str(config), "--ticks", "6"],
         clock=ManualClock(START))
    assert read(state)["life_stage"] == "baby"


def test_negative_ticks_rejected():
    with pytest.raises(SystemExit):
        parse_args(["--ticks", "-1"])


def test_ticks_and_realtime_are_exclusive():
    with pytest.raises(SystemExit):
        parse_args(["--ticks", "3", "--realtime"])
