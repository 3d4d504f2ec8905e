"""Basic smoke test to ensure the package imports cleanly."""

from pathlib import Path
import sys


def test_import_main():
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))
    import weather.main as weather_main
    assert weather_main.build_parser() is not None
