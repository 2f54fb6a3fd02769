"""Put the audit packages under ``src`` on ``sys.path`` for the CLI scripts."""

from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]

SRC_PATH = ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

__all__ = ["ROOT", "SRC_PATH"]
