"""Entry point for launching the weather scheduler."""

from weather.main import main


if __name__ == "__main__":
    raise SystemExit(main())
