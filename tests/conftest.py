"""Pytest configuration and fixtures."""
import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import pytest  # noqa: E402

from regression_walkthrough.config import ModelSpec  # noqa: E402
from regression_walkthrough.data.sample_data import make_earnings, make_turnout  # noqa: E402
from regression_walkthrough.models.fitting import fit_model  # noqa: E402


@pytest.fixture(autouse=True)
def close_figures():
    """Release figures created by each test."""
    yield
    plt.close("all")


@pytest.fixture
def earnings_df():
    """Simulated continuous-outcome data."""
    return make_earnings(n=400, seed=1)


@pytest.fixture
def turnout_df():
    """Simulated binary-outcome data."""
    return make_turnout(n=800, seed=2)


@pytest.fixture
def linear_spec():
    return ModelSpec(
        name="controls",
        kind="linear",
        formula="earnings ~ education + experience + female + C(region)",
        focal=["education", "region"],
    )


@pytest.fixture
def logistic_spec():
    return ModelSpec(
        name="full",
        kind="logistic",
        formula="voted ~ age + education + income + C(partisan)",
        focal=["age", "partisan"],
    )


@pytest.fixture
def linear_model(earnings_df, linear_spec):
    """Fitted OLS walkthrough model."""
    return fit_model(linear_spec, earnings_df)


@pytest.fixture
def logistic_model(turnout_df, logistic_spec):
    """Fitted logit walkthrough model."""
    return fit_model(logistic_spec, turnout_df)


@pytest.fixture
def sample_files(tmp_path, earnings_df, turnout_df):
    """Both datasets written to disk in their course formats."""
    linear_path = tmp_path / "data" / "earnings.csv"
    logistic_path = tmp_path / "data" / "turnout.dta"
    linear_path.parent.mkdir(parents=True)
    earnings_df.to_csv(linear_path, index=False)
    turnout_df.to_stata(logistic_path, write_index=False, version=118)
    return linear_path, logistic_path
