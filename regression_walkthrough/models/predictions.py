"""
Predicted values across one covariate (marginal effects).

A marginal effects plot varies a single focal variable over its
observed range while every other covariate is held at a typical value
(mean for numeric covariates, mode for categorical ones).  A variable
counts as categorical when its column is non-numeric or boolean, or
when the formula wraps it in ``C()``.  Predictions and their standard
errors come from statsmodels on the link scale and are then mapped
through the inverse link, so logistic predictions and their intervals
always stay inside [0, 1].
"""

from __future__ import annotations

import itertools
import logging
import re

import numpy as np
import pandas as pd
from scipy import special, stats

from .fitting import FittedModel, is_glm, is_logit, is_ols, unwrap
from .tidy import TIDY_COLUMNS, tidy

logger = logging.getLogger(__name__)

# numeric `by` variables with at most this many distinct values are treated as levels
MAX_BY_LEVELS = 10

_CATEGORICAL_TERM = re.compile(r"\bC\(\s*([A-Za-z_][A-Za-z0-9_.]*)")


def formula_categoricals(formula: str) -> set[str]:
    """Variables the formula treats as categorical through ``C(...)``."""
    return set(_CATEGORICAL_TERM.findall(formula))


def _is_categorical(series: pd.Series, categorical=()) -> bool:
    if series.name in categorical:
        return True
    return not pd.api.types.is_numeric_dtype(series) or pd.api.types.is_bool_dtype(series)


def _levels(series: pd.Series) -> list:
    if isinstance(series.dtype, pd.CategoricalDtype):
        present = set(series.dropna().unique())
        return [level for level in series.cat.categories if level in present]
    return sorted(series.dropna().unique().tolist())


def typical_values(data: pd.DataFrame, exclude=(), categorical=()) -> dict:
    """Values at which non-focal covariates are held: mean if numeric, mode otherwise.

    Columns named in `categorical` are held at their mode whatever
    their dtype.
    """
    held = {}
    for col in data.columns:
        if col in exclude:
            continue
        series = data[col].dropna()
        if series.empty:
            continue
        if _is_categorical(series, categorical):
            held[col] = series.mode().iloc[0]
        else:
            held[col] = float(series.mean())
    return held


def _by_values(series: pd.Series, categorical=()) -> list:
    if _is_categorical(series, categorical) or series.nunique() <= MAX_BY_LEVELS:
        return _levels(series)
    mean, sd = float(series.mean()), float(series.std())
    return [mean - sd, mean, mean + sd]


def prediction_grid(
    fitted: FittedModel,
    focal: str,
    n_points: int = 50,
    by: str | None = None,
    at: dict | None = None,
) -> pd.DataFrame:
    """New data for predictions along `focal`.

    A numeric focal variable gets `n_points` evenly spaced values over
    its observed range; a categorical one (including a numeric column
    the formula wraps in ``C()``) gets each observed level.
    When `by` is given the grid is crossed with its levels (or, for a
    continuous `by`, with its mean and mean +/- one standard deviation).
    `at` overrides the value any other covariate is held at.
    """
    data = fitted.data
    for name in filter(None, (focal, by)):
        if name not in data.columns:
            raise ValueError(f"Variable '{name}' is not in model {fitted.name!r}")
    if by == focal:
        raise ValueError("`by` must differ from the focal variable")
    if n_points < 2:
        raise ValueError(f"n_points must be at least 2, got {n_points}")

    categorical = formula_categoricals(fitted.formula)
    focal_series = data[focal]
    if _is_categorical(focal_series, categorical):
        focal_values = _levels(focal_series)
    else:
        focal_values = np.linspace(focal_series.min(), focal_series.max(), n_points).tolist()

    axes = {focal: focal_values}
    if by is not None:
        axes[by] = _by_values(data[by], categorical)

    exclude = set(axes) | {fitted.outcome}
    held = typical_values(data, exclude=exclude, categorical=categorical)
    for name, value in (at or {}).items():
        if name not in data.columns:
            raise ValueError(f"Variable '{name}' in `at` is not in model {fitted.name!r}")
        if name in axes:
            raise ValueError(f"Variable '{name}' is varied in the grid and cannot be fixed")
        held[name] = value

    grid = pd.DataFrame(list(itertools.product(*axes.values())), columns=list(axes))
    for name, value in held.items():
        grid[name] = value

    for col in grid.columns:
        if isinstance(data[col].dtype, pd.CategoricalDtype):
            grid[col] = pd.Categorical(grid[col], categories=data[col].cat.categories)
    return grid


def _inverse_link(result):
    if is_ols(result):
        return lambda eta: eta, lambda eta: np.ones_like(eta)
    if is_logit(result):
        return special.expit, lambda eta: special.expit(eta) * (1 - special.expit(eta))
    if is_glm(result):
        link = result.model.family.link
        return link.inverse, link.inverse_deriv
    raise ValueError(f"Unsupported model type {type(result.model).__name__}")


def _critical_value(result, conf_level: float) -> float:
    tail = 1 - (1 - conf_level) / 2
    if getattr(result, "use_t", False):
        return float(stats.t.ppf(tail, result.df_resid))
    return float(stats.norm.ppf(tail))


def _linear_prediction(result, newdata: pd.DataFrame):
    """Linear predictor and its standard error for `newdata`, via statsmodels."""
    if is_ols(result):
        prediction = result.get_prediction(newdata)
        return np.asarray(prediction.predicted_mean), np.asarray(prediction.se_mean)
    prediction = result.get_prediction(newdata, which="linear")
    return np.asarray(prediction.predicted), np.asarray(prediction.se)


def predict_values(model, newdata: pd.DataFrame, conf_level: float = 0.95) -> pd.DataFrame:
    """Predicted outcome with a confidence interval for each row of `newdata`.

    Returns `newdata` with ``predicted``, ``std_error``, ``conf_low`` and
    ``conf_high`` columns on the response scale.  The interval is built
    symmetrically on the link scale and then transformed.
    """
    if not 0 < conf_level < 1:
        raise ValueError(f"conf_level must be between 0 and 1, got {conf_level}")
    result = unwrap(model)
    inverse, inverse_deriv = _inverse_link(result)
    eta, se_eta = _linear_prediction(result, newdata)
    crit = _critical_value(result, conf_level)

    out = newdata.copy().reset_index(drop=True)
    out["predicted"] = inverse(eta)
    out["std_error"] = np.abs(inverse_deriv(eta)) * se_eta
    bounds = np.sort(np.column_stack([inverse(eta - crit * se_eta), inverse(eta + crit * se_eta)]), axis=1)
    out["conf_low"] = bounds[:, 0]
    out["conf_high"] = bounds[:, 1]
    return out


def marginal_effects(
    fitted: FittedModel,
    focal: str,
    n_points: int = 50,
    by: str | None = None,
    at: dict | None = None,
    conf_level: float = 0.95,
) -> pd.DataFrame:
    """Predicted values along `focal`, other covariates held at typical values."""
    logger.debug("Computing predictions for %s along %s (by=%s)", fitted.name, focal, by)
    grid = prediction_grid(fitted, focal, n_points=n_points, by=by, at=at)
    return predict_values(fitted, grid, conf_level=conf_level)


def average_marginal_effects(model, conf_level: float = 0.95) -> pd.DataFrame:
    """Average marginal effect of each regressor, in the tidy column layout.

    For a logit these are average derivatives of the predicted
    probability (discrete changes for 0/1 dummies); for OLS they are
    the slopes themselves.
    """
    result = unwrap(model)
    if is_ols(result):
        out = tidy(result, conf_level=conf_level)
        return out[out["term"] != "Intercept"].reset_index(drop=True)
    if not is_logit(result):
        raise ValueError("Average marginal effects are available for linear and logistic models only")

    margeff = result.get_margeff(at="overall", method="dydx", dummy=True)
    names = [name for name in result.model.exog_names if name != "Intercept"]
    ci = np.asarray(margeff.conf_int(alpha=1 - conf_level))
    out = pd.DataFrame(
        {
            "term": names,
            "estimate": np.asarray(margeff.margeff),
            "std_error": np.asarray(margeff.margeff_se),
            "statistic": np.asarray(margeff.tvalues),
            "p_value": np.asarray(margeff.pvalues),
            "conf_low": ci[:, 0],
            "conf_high": ci[:, 1],
        }
    )
    return out[TIDY_COLUMNS]
