#!/usr/bin/env python3
"""Standalone digest run for a cron job or GitHub Actions schedule.

Reads configuration from the environment (and .env), posts the
summaries, and exits non-zero on failure so the scheduler reports it.

Usage:
    uv run python scripts/run_digest.py
"""

import sys
from pathlib import Path

# Ensure project root is importable
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from hnbrief.main import main

if __name__ == "__main__":
    main()
