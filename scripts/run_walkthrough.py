#!/usr/bin/env python
"""Thin wrapper for running the regression walkthrough from a checkout.

Usage examples (run from project root)
# simulate the course datasets and build results/walkthrough.html
# python scripts/run_walkthrough.py --make-sample-data

# use existing data files and 90% intervals
# python scripts/run_walkthrough.py --linear-data data/raw/earnings.csv --logistic-data data/raw/turnout.dta --conf-level 0.9
"""
from __future__ import annotations

import sys
from pathlib import Path

# Ensure project root (folder containing regression_walkthrough) is importable
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from regression_walkthrough.cli import main  # noqa: E402

if __name__ == "__main__":
    raise SystemExit(main())
