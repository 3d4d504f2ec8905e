# logger.py — app logger + CSV trigger log (one row per weather event)
import csv, logging
from pathlib import Path
from typing import Optional, Union

INTENSITY_PRECISION = 4
SECONDS_PRECISION = 3
# --- App-wide logger ---
# Named logger for scheduler diagnostics (init, triggers, shutdown).
# Defaults to console, but can be configured to log to file.
APP_LOGGER = logging.getLogger("weather_system")
APP_LOGGER.setLevel(logging.INFO)
_formatter = logging.Formatter("[%(asctime)s] %(levelname)s: %(message)s", datefmt="%H:%M:%S")
_console_handler = logging.StreamHandler()
_console_handler.setFormatter(_formatter)
APP_LOGGER.addHandler(_console_handler)

def configure_file_logging(log_path: Path, level=logging.DEBUG):
    """Configures file logging for APP_LOGGER."""
    # Only one file handler at a time
    for handler in list(APP_LOGGER.handlers):
        if isinstance(handler, logging.FileHandler):
            APP_LOGGER.removeHandler(handler)
            try:
                handler.close()
            except Exception:
                pass

    file_handler = logging.FileHandler(log_path, encoding='utf-8')
    file_handler.setFormatter(_formatter)
    file_handler.setLevel(level)
    APP_LOGGER.addHandler(file_handler)
    APP_LOGGER.info(f"File logging enabled at: {log_path}")

# --- Per-run CSV trigger log ---
TRIGGER_FIELDS = [
    "trigger_id",
    "frame",
    "seconds",
    "weather",
    "intensity",
    "next_frame",
]

class TriggerLogger:
    """Appends a row to triggers.csv for every weather trigger.

    Registered on the scheduler like any other effect consumer; the
    scheduler handle is only used to read the freshly sampled next frame.
    """
    def __init__(self, run_dir: Union[Path, str], ticks_per_second: int = 30, scheduler=None):
        self.run_dir = Path(run_dir)
        self.run_dir.mkdir(parents=True, exist_ok=True)
        self.ticks_per_second = ticks_per_second
        self.scheduler = scheduler
        self.trigger_id = 0
        self._f = None
        self._w = None
        try:
            self._f = open(self.run_dir / "triggers.csv", "a", newline="", encoding="utf-8")
            self._w = csv.DictWriter(self._f, fieldnames=TRIGGER_FIELDS)
            if self._f.tell() == 0:
                self._w.writeheader()
        except Exception as e:
            APP_LOGGER.error(f"Failed to open triggers.csv for writing: {e}")
            self._f = None
            self._w = None

    @property
    def path(self) -> Path:
        return self.run_dir / "triggers.csv"

    def on_weather_changed(self, variant: str, magnitude: float, frame: int):
        next_frame: Optional[int] = None
        if self.scheduler is not None:
            next_frame = self.scheduler.get_state().next_trigger_frame
        self.log_trigger(frame, variant, magnitude, next_frame)

    def log_trigger(self, frame: int, weather: str, intensity: float, next_frame: Optional[int] = None):
        if self._w is None:
            APP_LOGGER.warning("TriggerLogger is not initialized, cannot log trigger.")
            return

        self.trigger_id += 1
        row = {
            "trigger_id": self.trigger_id,
            "frame": int(frame),
            "seconds": f"{frame / self.ticks_per_second:.{SECONDS_PRECISION}f}",
            "weather": weather,
            "intensity": f"{intensity:.{INTENSITY_PRECISION}f}",
            "next_frame": "" if next_frame is None else int(next_frame),
        }
        try:
            self._w.writerow(row)
            self._f.flush()
        except Exception as e:
            APP_LOGGER.error(f"Failed to write trigger to CSV: {e}")

    def close(self):
        try:
            if self._f and not self._f.closed:
                self._f.close()
        except Exception as e:
            APP_LOGGER.error(f"Failed to close triggers.csv: {e}")


def read_triggers(path: Union[Path, str]) -> list[dict]:
    """Load triggers.csv rows back as typed dicts (empty list on failure)."""
    rows = []
    try:
        with open(path, "r", encoding="utf-8", newline="") as fh:
            for row in csv.DictReader(fh):
                rows.append({
                    "trigger_id": int(row["trigger_id"]),
                    "frame": int(row["frame"]),
                    "seconds": float(row["seconds"]),
                    "weather": row["weather"],
                    "intensity": float(row["intensity"]),
                    "next_frame": int(row["next_frame"]) if row.get("next_frame") else None,
                })
    except Exception as e:
        APP_LOGGER.error(f"Failed to read triggers from {path}: {e}")
        return []
    return rows
