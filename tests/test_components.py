import csv

import pytest

from weather.core.clock import GameClock
from weather.core.interfaces import WeatherConfigError
from weather.core.logger import TriggerLogger, read_triggers
from weather.core.rng import SyncedRandom

# --- GameClock Tests ---
def test_clock_advance_and_seconds():
    clock = GameClock(30)
    assert clock.frame == 0
    assert clock.advance(90) == 90
    assert clock.seconds() == 3.0
    clock.set_speed(45)
    assert clock.ticks_per_second == 45
    assert clock.seconds() == 2.0

def test_clock_rejects_bad_values():
    with pytest.raises(WeatherConfigError):
        GameClock(0)
    with pytest.raises(WeatherConfigError):
        GameClock(30, start_frame=-1)
    clock = GameClock()
    with pytest.raises(ValueError):
        clock.advance(-1)

# --- SyncedRandom Tests ---
def test_synced_random_is_reproducible():
    a = SyncedRandom(42)
    b = SyncedRandom(42)
    seq_a = [(a.random(), a.uniform(120, 900), a.randint(0, 5)) for _ in range(20)]
    seq_b = [(b.random(), b.uniform(120, 900), b.randint(0, 5)) for _ in range(20)]
    assert seq_a == seq_b
    assert a.position() == b.position() == (42, 60)

def test_synced_random_snapshot_restore():
    a = SyncedRandom(7)
    for _ in range(5):
        a.random()
    snap = a.snapshot()
    expected = [a.uniform(0, 1) for _ in range(3)]

    late = SyncedRandom()
    late.restore(snap)
    assert late.position() == (7, 5)
    assert [late.uniform(0, 1) for _ in range(3)] == expected

def test_synced_random_reseed():
    rng = SyncedRandom(1)
    first = rng.random()
    rng.random()
    rng.set_seed(1)
    assert rng.draws == 0
    assert rng.random() == first
    assert rng.descriptor() == {"seed": 1, "draws": 1}

def test_synced_random_empty_range():
    with pytest.raises(ValueError):
        SyncedRandom().randint(3, 2)

# --- TriggerLogger Tests ---
def test_trigger_logger(tmp_path):
    run_dir = tmp_path / "test_run"
    tlog = TriggerLogger(run_dir=run_dir, ticks_per_second=30)

    assert run_dir.exists()
    assert (run_dir / "triggers.csv").exists()

    tlog.on_weather_changed("fog", 0.625, 3600)
    tlog.log_trigger(9000, "heavy_rain", 0.9, next_frame=12000)
    tlog.close()

    with open(run_dir / "triggers.csv", "r", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert len(rows) == 2
    assert rows[0]["trigger_id"] == "1"
    assert rows[0]["weather"] == "fog"
    assert rows[0]["seconds"] == "120.000"
    assert rows[0]["next_frame"] == ""
    assert rows[1]["intensity"] == "0.9000"

    parsed = read_triggers(run_dir / "triggers.csv")
    assert parsed[1] == {
        "trigger_id": 2,
        "frame": 9000,
        "seconds": 300.0,
        "weather": "heavy_rain",
        "intensity": 0.9,
        "next_frame": 12000,
    }

def test_read_triggers_missing_file(tmp_path):
    assert read_triggers(tmp_path / "none.csv") == []
