#!/usr/bin/env python3
from __future__ import annotations

import argparse
from pathlib import Path

from weather.core.logger import read_triggers
from weather.core.plotter import make_figure, save_figure


def main() -> int:
    parser = argparse.ArgumentParser(description="Render a weather timeline from a run's triggers.csv.")
    parser.add_argument("--run-dir", required=True, help="Run directory containing triggers.csv")
    parser.add_argument("--out", default=None, help="Output image path (default: <run-dir>/timeline.png)")
    parser.add_argument("--title", default=None, help="Figure title")
    args = parser.parse_args()

    run_dir = Path(args.run_dir)
    rows = read_triggers(run_dir / "triggers.csv")
    if not rows:
        print(f"No triggers found in {run_dir}")
        return 1
    kwargs = {"title": args.title} if args.title else {}
    fig = make_figure(
        [r["seconds"] for r in rows],
        [r["weather"] for r in rows],
        [r["intensity"] for r in rows],
        **kwargs,
    )
    out = Path(args.out) if args.out else run_dir / "timeline.png"
    save_figure(fig, str(out))
    print(f"Wrote {out}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
