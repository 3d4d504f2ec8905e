# weather/core/paths.py
from pathlib import Path

# This file is weather/core/paths.py, three parents up is the project root
BASE_DIR = Path(__file__).resolve().parent.parent.parent

def get_resource_path(relative_path: str) -> Path:
    """Absolute path of a file shipped at the project root."""
    return BASE_DIR / relative_path
