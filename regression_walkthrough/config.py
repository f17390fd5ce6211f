"""
Project configuration settings.

Edit the variables in this module, or set the matching environment
variables (a `.env` file in the project root is picked up), to point the
walkthrough at your own datasets.  Keeping configuration in one place
makes it easy to override default behaviour without modifying
individual modules.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Base directory for storing input and output data.
BASE_DIR: Path = Path(__file__).resolve().parents[1]

###############################################################################
# Directory paths
###############################################################################

# Course datasets live here
DATA_DIR: Path = Path(os.getenv("WALKTHROUGH_DATA_DIR", BASE_DIR / "data"))
RAW_DATA_DIR: Path = DATA_DIR / "raw"

# Tables and the rendered HTML document
RESULTS_DIR: Path = Path(os.getenv("WALKTHROUGH_RESULTS_DIR", BASE_DIR / "results"))

# Create directories if they do not already exist
for _dir in (RAW_DATA_DIR, RESULTS_DIR):
    _dir.mkdir(parents=True, exist_ok=True)

###############################################################################
# Datasets
###############################################################################

# Continuous outcome for the linear regression half of the walkthrough
LINEAR_DATASET: Path = Path(
    os.getenv("WALKTHROUGH_LINEAR_DATASET", RAW_DATA_DIR / "earnings.csv")
)

# Binary outcome for the logistic regression half
LOGISTIC_DATASET: Path = Path(
    os.getenv("WALKTHROUGH_LOGISTIC_DATASET", RAW_DATA_DIR / "turnout.dta")
)

REPORT_PATH: Path = RESULTS_DIR / "walkthrough.html"
REPORT_TITLE: str = "Linear and logistic regression walkthrough"

###############################################################################
# Modelling defaults
###############################################################################

CONFIDENCE_LEVEL: float = float(os.getenv("WALKTHROUGH_CONFIDENCE_LEVEL", "0.95"))

# Number of evaluation points along a numeric focal variable
PREDICTION_POINTS: int = 50

FIGURE_DPI: int = 100


@dataclass
class ModelSpec:
    """Description of one model fitted during the walkthrough.

    Parameters
    ----------
    name : str
        Short label used in tables, legends and artifact file names.
    kind : str
        ``"linear"`` (OLS) or ``"logistic"`` (logit).
    formula : str
        Model formula, e.g. ``"earnings ~ education + C(region)"``.
    focal : list of str
        Variables to draw marginal effects plots for.
    by : str, optional
        Second variable whose levels split every marginal effects plot.
    cov_type : str
        Covariance estimator passed to statsmodels (``"nonrobust"`` or
        one of the ``"HC0"``-``"HC3"`` sandwich estimators).
    """

    name: str
    kind: str
    formula: str
    focal: list[str] = field(default_factory=list)
    by: str | None = None
    cov_type: str = "nonrobust"


DEFAULT_LINEAR_MODELS: list[ModelSpec] = [
    ModelSpec(
        name="bivariate",
        kind="linear",
        formula="earnings ~ education",
        focal=["education"],
    ),
    ModelSpec(
        name="controls",
        kind="linear",
        formula="earnings ~ education + experience + female + C(region)",
        focal=["education", "region"],
    ),
    ModelSpec(
        name="interaction",
        kind="linear",
        formula="earnings ~ education * female + experience + C(region)",
        focal=["education"],
        by="female",
        cov_type="HC1",
    ),
]

DEFAULT_LOGISTIC_MODELS: list[ModelSpec] = [
    ModelSpec(
        name="baseline",
        kind="logistic",
        formula="voted ~ age + education",
        focal=["age"],
    ),
    ModelSpec(
        name="full",
        kind="logistic",
        formula="voted ~ age + education + income + C(partisan)",
        focal=["age", "partisan"],
    ),
    ModelSpec(
        name="quadratic_age",
        kind="logistic",
        formula="voted ~ age + I(age ** 2) + education + income",
        focal=["age"],
    ),
]
