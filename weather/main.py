"""Command-line entry point: run the weather scheduler headless or in real time."""
from __future__ import annotations

import argparse
import json
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from weather.core.configio import WeatherConfig, load_weather_config, save_config
from weather.core.interfaces import WeatherError
from weather.core.logger import APP_LOGGER, TriggerLogger, configure_file_logging, read_triggers
from weather.core.session import WeatherSession
from weather.core.version import APP_VERSION
from weather.core.workers import TickLoop

DEFAULT_DURATION_S = 3600.0
REALTIME_POLL_S = 0.25


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Global weather event scheduler.")
    parser.add_argument("--config", default=None, help="JSON config file (min_interval, max_interval, ...)")
    parser.add_argument("--seed", type=int, default=None, help="Shared random seed (overrides config)")
    parser.add_argument("--duration", type=float, default=DEFAULT_DURATION_S, help="Game seconds to run")
    parser.add_argument("--realtime", action="store_true", help="Run at wall-clock speed instead of headless")
    parser.add_argument("--speedup", type=float, default=1.0, help="Real-time speed multiplier")
    parser.add_argument("--shared", action="store_true", help="Publish state to a shared memory block")
    parser.add_argument("--shm-name", default=None, help="Shared memory block name (with --shared)")
    parser.add_argument("--out", default=None, help="Run directory for run.json and triggers.csv")
    parser.add_argument("--plot", default=None, help="Save a timeline figure to this path")
    parser.add_argument("--log-file", default=None, help="Also write the app log to this file")
    parser.add_argument("--save-config", default=None, help="Write the resolved config as JSON to this path")
    parser.add_argument("--version", action="version", version=f"%(prog)s {APP_VERSION}")
    return parser


def resolve_config(args: argparse.Namespace) -> WeatherConfig:
    cfg = load_weather_config(Path(args.config) if args.config else None)
    if args.seed is not None:
        cfg = WeatherConfig.from_dict({**cfg.to_dict(), "seed": args.seed}).validate()
    return cfg


def write_run_json(run_dir: Path, session: WeatherSession, started_at: str) -> None:
    run_json = {
        "started_at": started_at,
        "app_version": APP_VERSION,
        "config": session.config.to_dict(),
        "scheduler": session.scheduler.descriptor(),
        "rng": session.rng.descriptor(),
        "final_frame": session.clock.frame,
    }
    try:
        with open(run_dir / "run.json", "w", encoding="utf-8") as f:
            json.dump(run_json, f, indent=2)
    except Exception as e:
        APP_LOGGER.error(f"Failed to write run.json: {e}")


def run(args: argparse.Namespace) -> int:
    if args.log_file:
        configure_file_logging(Path(args.log_file))
    cfg = resolve_config(args)
    if args.save_config:
        save_config(cfg.to_dict(), Path(args.save_config))
    started_at = datetime.now(timezone.utc).isoformat()

    with WeatherSession.create(cfg, shared=args.shared, shm_name=args.shm_name) as session:
        trigger_log: Optional[TriggerLogger] = None
        run_dir = Path(args.out) if args.out else None
        if run_dir is not None:
            trigger_log = TriggerLogger(run_dir, cfg.ticks_per_second, scheduler=session.scheduler)
            session.add_consumer(trigger_log)

        if args.realtime:
            loop = TickLoop(session, speedup=args.speedup)
            target = session.clock.frame + int(args.duration * cfg.ticks_per_second)
            loop.start()
            try:
                while loop.running and session.clock.frame < target:
                    time.sleep(REALTIME_POLL_S)
            except KeyboardInterrupt:
                APP_LOGGER.info("Interrupted.")
            finally:
                loop.stop()
            if loop.error is not None:
                raise loop.error
        else:
            session.run_seconds(args.duration)

        APP_LOGGER.info(
            f"Ran {session.clock.seconds():.0f}s of game time: {session.triggers} weather events, "
            f"current={session.scheduler.get_current_weather()}"
        )
        if run_dir is not None:
            write_run_json(run_dir, session, started_at)

    if args.plot:
        if trigger_log is None:
            APP_LOGGER.warning("--plot needs --out; skipping figure")
        else:
            from weather.core.plotter import make_figure, save_figure
            rows = read_triggers(trigger_log.path)
            fig = make_figure(
                [r["seconds"] for r in rows],
                [r["weather"] for r in rows],
                [r["intensity"] for r in rows],
            )
            save_figure(fig, args.plot)
            APP_LOGGER.info(f"Timeline saved to {args.plot}")
    return 0


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return run(args)
    except WeatherError as e:
        APP_LOGGER.error(f"Weather system failed to start: {e}")
        return 2
