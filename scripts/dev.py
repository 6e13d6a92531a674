#!/usr/bin/env python3
"""Dev shim: loads .env and launches Slidev for one presentation.

Usage: python scripts/dev.py <presentation-name>
"""

from __future__ import annotations

from pathlib import Path
import sys

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from dotenv import load_dotenv
from deckdev.launcher import main


if __name__ == "__main__":
    load_dotenv(ROOT_DIR / ".env")
    raise SystemExit(main(root_dir=ROOT_DIR))
