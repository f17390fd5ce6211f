"""Side-by-side regression table for several fitted models."""

from __future__ import annotations

import numpy as np
import pandas as pd

from .fitting import is_ols, unwrap
from .tidy import glance, tidy

# (threshold, marker), checked from the strictest down
STAR_LEVELS = [(0.001, "***"), (0.01, "**"), (0.05, "*"), (0.1, "+")]


def significance_stars(p_value: float) -> str:
    """Conventional significance marker for a p-value."""
    if p_value is None or np.isnan(p_value):
        return ""
    for threshold, marker in STAR_LEVELS:
        if p_value < threshold:
            return marker
    return ""


def _fmt(value: float, digits: int) -> str:
    return "" if value is None or np.isnan(value) else f"{value:,.{digits}f}"


def regression_table(models, conf_level: float = 0.95, stars: bool = True, digits: int = 3) -> pd.DataFrame:
    """Build a publication-style table with one column per model.

    Parameters
    ----------
    models : mapping of str to FittedModel or statsmodels results
        Models to compare; keys become column headers.
    conf_level : float
        Passed through to `tidy`; the table shows standard errors.
    stars : bool
        Append significance markers (+ p<0.1, * p<0.05, ** p<0.01,
        *** p<0.001) to the estimates.
    digits : int
        Decimal places.

    Returns
    -------
    pandas.DataFrame
        Indexed by row label: each term contributes an estimate row and a
        ``(se)`` row beneath it, followed by ``N``, ``R²`` or
        ``Pseudo R²``, and ``AIC``.
    """
    if not models:
        raise ValueError("regression_table needs at least one model")

    tidied = {name: tidy(model, conf_level=conf_level).set_index("term") for name, model in models.items()}
    terms: list[str] = []
    for frame in tidied.values():
        terms.extend(term for term in frame.index if term not in terms)

    rows: dict[str, dict[str, str]] = {}
    for term in terms:
        est_row, se_row = {}, {}
        for name, frame in tidied.items():
            if term in frame.index:
                coef = frame.loc[term]
                marker = significance_stars(coef["p_value"]) if stars else ""
                est_row[name] = _fmt(coef["estimate"], digits) + marker
                se_row[name] = f"({_fmt(coef['std_error'], digits)})"
            else:
                est_row[name] = ""
                se_row[name] = ""
        rows[term] = est_row
        rows[f"{term} (se)"] = se_row

    fit_rows = {"N": {}, "R²": {}, "Pseudo R²": {}, "AIC": {}}
    for name, model in models.items():
        stats = glance(model).iloc[0]
        fit_rows["N"][name] = f"{int(stats['nobs']):,}"
        fit_rows["R²"][name] = _fmt(stats["r_squared"], digits)
        fit_rows["Pseudo R²"][name] = _fmt(stats["pseudo_r_squared"], digits)
        fit_rows["AIC"][name] = _fmt(stats["aic"], 1)

    any_ols = any(is_ols(unwrap(model)) for model in models.values())
    any_other = any(not is_ols(unwrap(model)) for model in models.values())
    if not any_ols:
        del fit_rows["R²"]
    if not any_other:
        del fit_rows["Pseudo R²"]
    rows.update(fit_rows)

    table = pd.DataFrame.from_dict(rows, orient="index", columns=list(models))
    table.index.name = "term"
    return table
