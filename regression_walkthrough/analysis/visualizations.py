"""Visualisation utilities for fitted models and their input data.

Every function returns a `matplotlib.figure.Figure`; use `save_figure`
to write it to disk, or hand it to the report builder which embeds it
in the HTML document.
"""

from __future__ import annotations

import logging
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import statsmodels.api as sm
from statsmodels.nonparametric.smoothers_lowess import lowess

from ..models.fitting import FittedModel, is_logit, is_ols, unwrap
from ..models.tidy import augment, tidy

logger = logging.getLogger(__name__)


def save_figure(fig, path, dpi: int = 100) -> Path:
    """Write `fig` to `path` and close it."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(path, dpi=dpi, bbox_inches="tight")
    plt.close(fig)
    logger.debug("Saved figure %s", path)
    return path


def _as_tidy_frames(models, conf_level: float, exponentiate: bool) -> dict[str, pd.DataFrame]:
    if isinstance(models, pd.DataFrame):
        return {"model": models}
    if isinstance(models, dict):
        return {
            name: m if isinstance(m, pd.DataFrame) else tidy(m, conf_level=conf_level, exponentiate=exponentiate)
            for name, m in models.items()
        }
    name = models.name if isinstance(models, FittedModel) else "model"
    return {name: tidy(models, conf_level=conf_level, exponentiate=exponentiate)}


def coefficient_plot(
    models,
    exclude_intercept: bool = True,
    exponentiate: bool = False,
    conf_level: float = 0.95,
    title: str | None = None,
):
    """Point estimates with confidence intervals for one or more models.

    Parameters
    ----------
    models : FittedModel, statsmodels results, tidy DataFrame, or a dict of them
        When several models are passed their estimates are dodged
        vertically and distinguished by colour.
    exclude_intercept : bool
        Leave the intercept out; it is usually on a different scale.
    exponentiate : bool
        Plot exponentiated coefficients (odds ratios for a logit) on a
        log axis with the reference line at 1.
    """
    frames = _as_tidy_frames(models, conf_level, exponentiate)
    if exclude_intercept:
        frames = {name: f[f["term"] != "Intercept"] for name, f in frames.items()}

    terms: list[str] = []
    for frame in frames.values():
        terms.extend(t for t in frame["term"] if t not in terms)
    if not terms:
        raise ValueError("No coefficients left to plot")

    positions = {term: i for i, term in enumerate(terms)}
    n_models = len(frames)
    offsets = np.linspace(-0.25, 0.25, n_models) if n_models > 1 else np.zeros(1)

    fig, ax = plt.subplots(figsize=(7, max(2.5, 0.45 * len(terms) + 1.2)))
    for offset, (name, frame) in zip(offsets, frames.items()):
        y = np.array([positions[t] for t in frame["term"]]) + offset
        est = frame["estimate"].to_numpy()
        xerr = np.vstack([est - frame["conf_low"].to_numpy(), frame["conf_high"].to_numpy() - est])
        ax.errorbar(est, y, xerr=xerr, fmt="o", capsize=3, label=name)

    ax.axvline(1.0 if exponentiate else 0.0, color="grey", linestyle="--", linewidth=1)
    if exponentiate:
        ax.set_xscale("log")
    ax.set_yticks(range(len(terms)))
    ax.set_yticklabels(terms)
    ax.invert_yaxis()
    ax.set_xlabel(("Odds ratio" if exponentiate else "Estimate") + f" ({conf_level:.0%} CI)")
    if n_models > 1:
        ax.legend(loc="best")
    ax.set_title(title or "Coefficient plot")
    ax.grid(axis="x", linestyle="--", alpha=0.5)
    fig.tight_layout()
    return fig


def marginal_effects_plot(
    predictions: pd.DataFrame,
    focal: str,
    by: str | None = None,
    outcome_label: str | None = None,
    title: str | None = None,
):
    """Predicted outcome across `focal` with confidence bands.

    `predictions` is the frame returned by
    `models.predictions.marginal_effects`.  A numeric focal variable is
    drawn as a line with a shaded interval; a categorical one as points
    with interval bars.  `by` draws one series per level.
    """
    for col in (focal, "predicted", "conf_low", "conf_high"):
        if col not in predictions.columns:
            raise ValueError(f"Column '{col}' missing from predictions")

    groups = [(None, predictions)] if by is None else list(predictions.groupby(by, sort=False, observed=True))
    categorical = not pd.api.types.is_numeric_dtype(predictions[focal])

    fig, ax = plt.subplots(figsize=(7, 4.5))
    if categorical:
        levels = list(dict.fromkeys(predictions[focal]))
        offsets = np.linspace(-0.2, 0.2, len(groups)) if len(groups) > 1 else np.zeros(1)
        for offset, (level, frame) in zip(offsets, groups):
            x = np.array([levels.index(v) for v in frame[focal]]) + offset
            est = frame["predicted"].to_numpy()
            yerr = np.vstack([est - frame["conf_low"].to_numpy(), frame["conf_high"].to_numpy() - est])
            ax.errorbar(x, est, yerr=yerr, fmt="o", capsize=4, label=None if by is None else f"{by} = {level}")
        ax.set_xticks(range(len(levels)))
        ax.set_xticklabels([str(v) for v in levels])
    else:
        for level, frame in groups:
            frame = frame.sort_values(focal)
            label = None if by is None else f"{by} = {level:g}" if isinstance(level, float) else f"{by} = {level}"
            (line,) = ax.plot(frame[focal], frame["predicted"], label=label)
            ax.fill_between(frame[focal], frame["conf_low"], frame["conf_high"], color=line.get_color(), alpha=0.2)

    ax.set_xlabel(focal)
    ax.set_ylabel(outcome_label or "Predicted value")
    if by is not None:
        ax.legend(loc="best")
    ax.set_title(title or f"Predicted values by {focal}")
    ax.grid(linestyle="--", alpha=0.5)
    fig.tight_layout()
    return fig


def _binned_residual_plot(result, n_bins: int | None = None):
    y = np.asarray(result.model.endog, dtype=float)
    prob = np.asarray(result.predict(), dtype=float)
    n_bins = n_bins or max(5, min(40, int(np.sqrt(len(y)))))

    frame = pd.DataFrame({"prob": prob, "resid": y - prob})
    frame["bin"] = pd.qcut(frame["prob"], q=n_bins, duplicates="drop")
    binned = frame.groupby("bin", observed=True).agg(
        prob=("prob", "mean"), resid=("resid", "mean"), n=("resid", "size")
    )
    bound = 2 * np.sqrt(binned["prob"] * (1 - binned["prob"]) / binned["n"])

    fig, ax = plt.subplots(figsize=(7, 4.5))
    ax.scatter(binned["prob"], binned["resid"], s=18)
    ax.plot(binned["prob"], bound, color="grey", linewidth=1)
    ax.plot(binned["prob"], -bound, color="grey", linewidth=1)
    ax.axhline(0, color="black", linewidth=0.8)
    ax.set_xlabel("Mean predicted probability")
    ax.set_ylabel("Mean residual")
    ax.set_title("Binned residuals")
    fig.tight_layout()
    return fig


def diagnostic_plots(model):
    """Residual diagnostics.

    OLS gets the usual 2x2 panel (residuals vs fitted, normal Q-Q,
    scale-location, residuals vs leverage); a logit gets a binned
    residual plot, since raw residuals of a binary outcome are not
    informative.
    """
    result = unwrap(model)
    if is_logit(result):
        return _binned_residual_plot(result)
    if not is_ols(result):
        raise ValueError("Diagnostic plots are available for linear and logistic models only")

    aug = augment(model)
    fitted, resid, std_resid = aug[".fitted"], aug[".resid"], aug[".std_resid"]

    fig, axes = plt.subplots(2, 2, figsize=(10, 8))

    ax = axes[0, 0]
    ax.scatter(fitted, resid, s=10, alpha=0.6)
    smooth = lowess(resid, fitted, frac=2 / 3)
    ax.plot(smooth[:, 0], smooth[:, 1], color="red", linewidth=1)
    ax.axhline(0, color="grey", linestyle="--", linewidth=1)
    ax.set_xlabel("Fitted values")
    ax.set_ylabel("Residuals")
    ax.set_title("Residuals vs Fitted")

    sm.qqplot(std_resid, line="45", ax=axes[0, 1], markersize=3)
    axes[0, 1].set_title("Normal Q-Q")

    ax = axes[1, 0]
    root_abs = np.sqrt(np.abs(std_resid))
    ax.scatter(fitted, root_abs, s=10, alpha=0.6)
    smooth = lowess(root_abs, fitted, frac=2 / 3)
    ax.plot(smooth[:, 0], smooth[:, 1], color="red", linewidth=1)
    ax.set_xlabel("Fitted values")
    ax.set_ylabel("sqrt(|Standardized residuals|)")
    ax.set_title("Scale-Location")

    ax = axes[1, 1]
    sizes = 10 + 400 * aug[".cooksd"] / max(aug[".cooksd"].max(), 1e-12)
    ax.scatter(aug[".hat"], std_resid, s=sizes, alpha=0.5)
    ax.axhline(0, color="grey", linestyle="--", linewidth=1)
    ax.set_xlabel("Leverage")
    ax.set_ylabel("Standardized residuals")
    ax.set_title("Residuals vs Leverage (size = Cook's distance)")

    fig.tight_layout()
    return fig


def distribution_plots(df: pd.DataFrame, columns=None, bins: int = 30):
    """Histograms of the numeric variables in `df`, one panel each."""
    numeric_cols = list(columns) if columns is not None else list(df.select_dtypes(include="number").columns)
    if not numeric_cols:
        raise ValueError("No numeric columns to plot")

    n_cols = min(3, len(numeric_cols))
    n_rows = int(np.ceil(len(numeric_cols) / n_cols))
    fig, axes = plt.subplots(n_rows, n_cols, figsize=(4 * n_cols, 3 * n_rows), squeeze=False)
    for ax, col in zip(axes.flat, numeric_cols):
        df[col].dropna().hist(bins=bins, ax=ax)
        ax.set_title(f"Distribution of {col}")
        ax.set_xlabel(col)
        ax.set_ylabel("Count")
    for ax in list(axes.flat)[len(numeric_cols):]:
        ax.set_visible(False)
    fig.tight_layout()
    return fig
