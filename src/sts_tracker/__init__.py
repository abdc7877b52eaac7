"""Slay the Spire run trackers."""

import os
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent

# Load .env manually (no external deps)
_env_path = PROJECT_ROOT / ".env"
if _env_path.exists():
    with open(_env_path) as _f:
        for _line in _f:
            _line = _line.strip()
            if _line and not _line.startswith("#") and "=" in _line:
                _k, _v = _line.split("=", 1)
                os.environ.setdefault(_k.strip(), _v.strip())

RUNS_DIR = Path(os.environ.get("STS_RUNS_DIR", PROJECT_ROOT / "runs"))
DATA_DIR = Path(os.environ.get("STS_DATA_DIR", PROJECT_ROOT / "data"))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "WARNING").upper()
