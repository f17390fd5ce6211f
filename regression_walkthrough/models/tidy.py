"""
Tidy summaries of fitted models.

Three views of a fitted model, each returned as a DataFrame:

- `tidy`: one row per term (estimate, standard error, test statistic,
  p-value, confidence interval);
- `glance`: one row per model (fit statistics);
- `augment`: one row per observation (fitted values, residuals and,
  for OLS, influence measures).

The generic accessors at the bottom expose the same pieces one at a
time for readers following along step by step.
"""

from __future__ import annotations

import numpy as np
import pandas as pd

from .fitting import FittedModel, is_glm, is_logit, is_ols, unwrap

TIDY_COLUMNS = [
    "term",
    "estimate",
    "std_error",
    "statistic",
    "p_value",
    "conf_low",
    "conf_high",
]


def _check_level(conf_level: float) -> None:
    if not 0 < conf_level < 1:
        raise ValueError(f"conf_level must be between 0 and 1, got {conf_level}")


def tidy(model, conf_level: float = 0.95, exponentiate: bool = False) -> pd.DataFrame:
    """Per-term coefficient table.

    Parameters
    ----------
    model : FittedModel or statsmodels results
        Fitted model.
    conf_level : float
        Confidence level of the interval columns.
    exponentiate : bool
        Report ``exp(estimate)`` and an exponentiated interval, i.e.
        odds ratios for a logit.  The standard error is transformed by
        the delta method; statistic and p-value are unchanged.
    """
    _check_level(conf_level)
    result = unwrap(model)
    ci = result.conf_int(alpha=1 - conf_level)

    out = pd.DataFrame(
        {
            "term": result.params.index,
            "estimate": result.params.to_numpy(),
            "std_error": result.bse.to_numpy(),
            "statistic": result.tvalues.to_numpy(),
            "p_value": result.pvalues.to_numpy(),
            "conf_low": ci.iloc[:, 0].to_numpy(),
            "conf_high": ci.iloc[:, 1].to_numpy(),
        }
    )
    if exponentiate:
        out["std_error"] = np.exp(out["estimate"]) * out["std_error"]
        for col in ("estimate", "conf_low", "conf_high"):
            out[col] = np.exp(out[col])
    return out[TIDY_COLUMNS]


def glance(model) -> pd.DataFrame:
    """One-row table of model-level fit statistics."""
    result = unwrap(model)
    row = {
        "nobs": int(result.nobs),
        "df_model": float(result.df_model),
        "df_resid": float(result.df_resid),
        "log_likelihood": float(result.llf),
        "aic": float(result.aic),
        "bic": float(result.bic),
        "r_squared": np.nan,
        "adj_r_squared": np.nan,
        "sigma": np.nan,
        "f_statistic": np.nan,
        "f_p_value": np.nan,
        "pseudo_r_squared": np.nan,
        "deviance": np.nan,
        "null_deviance": np.nan,
    }
    if is_ols(result):
        row.update(
            r_squared=float(result.rsquared),
            adj_r_squared=float(result.rsquared_adj),
            sigma=float(np.sqrt(result.scale)),
            f_statistic=float(np.squeeze(result.fvalue)),
            f_p_value=float(np.squeeze(result.f_pvalue)),
        )
    elif is_logit(result):
        row.update(
            pseudo_r_squared=float(result.prsquared),
            deviance=float(-2 * result.llf),
            null_deviance=float(-2 * result.llnull),
        )
    elif is_glm(result):
        row.update(
            pseudo_r_squared=float(1 - result.llf / result.llnull),
            deviance=float(result.deviance),
            null_deviance=float(result.null_deviance),
        )
    return pd.DataFrame([row])


def augment(model, data: pd.DataFrame | None = None) -> pd.DataFrame:
    """Observation-level table: the model frame plus fitted values and residuals.

    Columns added are ``.fitted`` and ``.resid``; for a logit ``.fitted``
    is the predicted probability, ``.resid`` the Pearson residual and
    ``.linear_predictor`` the log-odds.  OLS models also get ``.hat``,
    ``.std_resid`` (internally studentized) and ``.cooksd``.
    """
    result = unwrap(model)
    if data is None:
        data = model.data if isinstance(model, FittedModel) else result.model.data.frame

    index = result.fittedvalues.index
    out = data.loc[index].copy()
    linear_predictor = result.model.exog @ result.params.to_numpy()

    if is_ols(result):
        influence = result.get_influence()
        out[".fitted"] = result.fittedvalues.to_numpy()
        out[".resid"] = result.resid.to_numpy()
        out[".hat"] = influence.hat_matrix_diag
        out[".std_resid"] = influence.resid_studentized_internal
        out[".cooksd"] = influence.cooks_distance[0]
    elif is_logit(result):
        out[".fitted"] = np.asarray(result.predict())
        out[".resid"] = np.asarray(result.resid_pearson)
        out[".linear_predictor"] = linear_predictor
    else:
        out[".fitted"] = np.asarray(result.fittedvalues)
        out[".resid"] = np.asarray(result.resid_pearson)
        out[".linear_predictor"] = linear_predictor
    return out.reset_index(drop=True)


def coefficients(model) -> pd.Series:
    return unwrap(model).params.copy()


def confidence_intervals(model, conf_level: float = 0.95) -> pd.DataFrame:
    _check_level(conf_level)
    ci = unwrap(model).conf_int(alpha=1 - conf_level)
    ci.columns = ["conf_low", "conf_high"]
    return ci


def fitted_values(model) -> pd.Series:
    """Fitted values on the response scale (probabilities for a logit)."""
    result = unwrap(model)
    if is_logit(result):
        return pd.Series(np.asarray(result.predict()), index=result.fittedvalues.index)
    return result.fittedvalues.copy()


def residuals(model) -> pd.Series:
    """Response residuals for OLS, Pearson residuals otherwise."""
    result = unwrap(model)
    if is_ols(result):
        return result.resid.copy()
    return pd.Series(np.asarray(result.resid_pearson), index=result.fittedvalues.index)
