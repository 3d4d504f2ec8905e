import json

from weather.core.logger import read_triggers
from weather.main import build_parser, main, resolve_config


def test_headless_run_writes_artifacts(tmp_path):
    out = tmp_path / "run"
    plot = tmp_path / "timeline.png"
    rc = main(["--seed", "11", "--duration", "7200", "--out", str(out), "--plot", str(plot)])
    assert rc == 0

    meta = json.loads((out / "run.json").read_text(encoding="utf-8"))
    assert meta["config"]["seed"] == 11
    assert meta["final_frame"] == 7200 * 30
    rows = read_triggers(out / "triggers.csv")
    assert len(rows) == meta["scheduler"]["trigger_count"]
    assert rows, "two hours should produce at least one event"
    assert rows[-1]["weather"] == meta["scheduler"]["current_weather"]
    assert plot.exists()

def test_same_seed_same_triggers(tmp_path):
    main(["--seed", "4", "--duration", "3600", "--out", str(tmp_path / "a")])
    main(["--seed", "4", "--duration", "3600", "--out", str(tmp_path / "b")])
    assert read_triggers(tmp_path / "a" / "triggers.csv") == read_triggers(tmp_path / "b" / "triggers.csv")

def test_bad_config_exits_nonzero(tmp_path):
    cfg = tmp_path / "bad.json"
    cfg.write_text(json.dumps({"min_interval": 900, "max_interval": 100}), encoding="utf-8")
    assert main(["--config", str(cfg), "--duration", "1"]) == 2

def test_seed_override(tmp_path):
    cfg = tmp_path / "cfg.json"
    cfg.write_text(json.dumps({"seed": 1, "min_interval": 10}), encoding="utf-8")
    args = build_parser().parse_args(["--config", str(cfg), "--seed", "9"])
    resolved = resolve_config(args)
    assert resolved.seed == 9
    assert resolved.min_interval == 10

def test_missing_config_exits_nonzero(tmp_path):
    assert main(["--config", str(tmp_path / "absent.json"), "--duration", "1"]) == 2

def test_save_config_writes_resolved_values(tmp_path):
    saved = tmp_path / "saved.json"
    assert main(["--seed", "21", "--duration", "1", "--save-config", str(saved)]) == 0
    assert json.loads(saved.read_text(encoding="utf-8"))["seed"] == 21
