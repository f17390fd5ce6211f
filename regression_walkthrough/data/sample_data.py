"""
Simulated versions of the two course datasets.

The walkthrough expects a continuous-outcome dataset (`earnings.csv`)
and a binary-outcome dataset (`turnout.dta`).  When the real files are
not available these generators produce data with the same columns and
plausible relationships so every step can run end to end.
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import pandas as pd

from ..utils.file_io import write_table

logger = logging.getLogger(__name__)

REGIONS = ["North", "South", "East", "West"]
PARTISANSHIP = ["Democrat", "Independent", "Republican"]


def make_earnings(n: int = 1000, seed: int = 42) -> pd.DataFrame:
    """Simulate annual earnings (in $1,000s) for `n` respondents.

    Columns: ``earnings``, ``education`` (years), ``experience``
    (years), ``female`` (0/1) and ``region`` (four levels).  The true
    model includes an education x female interaction so the walkthrough
    has something to show in the grouped marginal effects plot.
    """
    rng = np.random.default_rng(seed)
    education = rng.integers(8, 21, size=n)
    experience = np.clip(rng.normal(18, 10, size=n), 0, 45).round(1)
    female = rng.binomial(1, 0.5, size=n)
    region = rng.choice(REGIONS, size=n, p=[0.3, 0.25, 0.25, 0.2])

    region_effect = pd.Series(region).map(
        {"North": 0.0, "South": -4.0, "East": 2.0, "West": 3.5}
    ).to_numpy()
    earnings = (
        8.0
        + 2.6 * education
        + 0.45 * experience
        - 3.0 * female
        - 0.35 * education * female
        + region_effect
        + rng.normal(0, 9.0, size=n)
    )

    return pd.DataFrame(
        {
            "earnings": earnings.round(2),
            "education": education,
            "experience": experience,
            "female": female,
            "region": region,
        }
    )


def make_turnout(n: int = 1500, seed: int = 7) -> pd.DataFrame:
    """Simulate whether each of `n` respondents voted.

    Columns: ``voted`` (0/1), ``age`` (years), ``education`` (years),
    ``income`` ($10,000s) and ``partisan`` (three levels).  Turnout
    rises with age at a decreasing rate.
    """
    rng = np.random.default_rng(seed)
    age = rng.integers(18, 91, size=n)
    education = rng.integers(8, 21, size=n)
    income = np.round(rng.lognormal(mean=1.5, sigma=0.6, size=n), 2)
    partisan = rng.choice(PARTISANSHIP, size=n, p=[0.38, 0.27, 0.35])

    partisan_effect = pd.Series(partisan).map(
        {"Democrat": 0.0, "Independent": -0.7, "Republican": 0.1}
    ).to_numpy()
    linear_predictor = (
        -5.0
        + 0.09 * age
        - 0.0006 * age ** 2
        + 0.18 * education
        + 0.08 * income
        + partisan_effect
    )
    prob = 1.0 / (1.0 + np.exp(-linear_predictor))
    voted = rng.binomial(1, prob)

    return pd.DataFrame(
        {
            "voted": voted,
            "age": age,
            "education": education,
            "income": income,
            "partisan": partisan,
        }
    )


def write_sample_datasets(linear_path, logistic_path):
    """Write both simulated datasets and return their paths.

    Each file is written in the format its suffix names (CSV, tab-separated,
    Stata, Parquet or Excel); an unsupported suffix raises ``ValueError``.
    """
    linear_path = Path(linear_path)
    logistic_path = Path(logistic_path)

    logger.info("Writing simulated earnings data to %s", linear_path)
    write_table(make_earnings(), linear_path)

    logger.info("Writing simulated turnout data to %s", logistic_path)
    write_table(make_turnout(), logistic_path)

    return linear_path, logistic_path
