"""
Fit linear and logistic regression models from formulas.

All estimation is done by statsmodels; the helpers here take care of
listwise deletion on the formula's variables, check that a logistic
outcome really is binary, and wrap the results handle together with
the frame it was fitted on so later steps (tidy tables, prediction
grids, diagnostics) can find both.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

import pandas as pd
import statsmodels.api as sm
import statsmodels.formula.api as smf
from statsmodels.discrete.discrete_model import Logit
from statsmodels.genmod.generalized_linear_model import GLM
from statsmodels.regression.linear_model import OLS

logger = logging.getLogger(__name__)

MODEL_KINDS = ("linear", "logistic")

COV_TYPES = ("nonrobust", "HC0", "HC1", "HC2", "HC3")

_FAMILIES = {
    "gaussian": sm.families.Gaussian,
    "binomial": sm.families.Binomial,
    "poisson": sm.families.Poisson,
}

_LINKS = {
    "identity": sm.families.links.Identity,
    "logit": sm.families.links.Logit,
    "probit": sm.families.links.Probit,
    "log": sm.families.links.Log,
}

_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_.]*")


@dataclass
class FittedModel:
    """A fitted walkthrough model.

    `result` is the statsmodels results object and is treated as an
    opaque handle; `data` is the frame the model was estimated on after
    listwise deletion.
    """

    name: str
    kind: str
    formula: str
    result: object
    data: pd.DataFrame
    focal: list[str] = field(default_factory=list)
    by: str | None = None

    @property
    def outcome(self) -> str:
        return outcome_name(self.formula)

    @property
    def is_logistic(self) -> bool:
        return self.kind == "logistic"


def unwrap(model):
    """Return the statsmodels results object behind a `FittedModel` (or the object itself)."""
    return model.result if isinstance(model, FittedModel) else model


def is_ols(result) -> bool:
    return isinstance(unwrap(result).model, OLS)


def is_logit(result) -> bool:
    return isinstance(unwrap(result).model, Logit)


def is_glm(result) -> bool:
    return isinstance(unwrap(result).model, GLM)


def outcome_name(formula: str) -> str:
    """Left-hand side of a formula, stripped of whitespace."""
    if "~" not in formula:
        raise ValueError(f"Formula has no '~': {formula!r}")
    return formula.split("~", 1)[0].strip()


def formula_variables(formula: str, data: pd.DataFrame) -> list[str]:
    """Columns of `data` referenced anywhere in `formula`, in order of appearance."""
    seen = []
    for token in _IDENTIFIER.findall(formula):
        if token in data.columns and token not in seen:
            seen.append(token)
    return seen


def model_frame(formula: str, data: pd.DataFrame) -> pd.DataFrame:
    """Subset `data` to the formula's variables and drop incomplete rows."""
    columns = formula_variables(formula, data)
    if not columns:
        raise ValueError(f"No columns of the data appear in formula {formula!r}")
    frame = data[columns].dropna()
    dropped = len(data) - len(frame)
    if dropped:
        logger.info("Listwise deletion dropped %d of %d rows for %s", dropped, len(data), formula)
    return frame.reset_index(drop=True)


def _check_cov_type(cov_type: str) -> None:
    if cov_type not in COV_TYPES:
        raise ValueError(f"Unknown cov_type {cov_type!r}; expected one of {COV_TYPES}")


def _check_binary(frame: pd.DataFrame, outcome: str) -> None:
    if outcome not in frame.columns:
        # transformed outcome (e.g. "I(y > 0)"); leave validation to the formula engine
        return
    values = frame[outcome]
    if pd.api.types.is_bool_dtype(values):
        return
    if not pd.api.types.is_numeric_dtype(values) or not set(values.unique()) <= {0, 1}:
        raise ValueError(
            f"Logistic outcome '{outcome}' must be coded 0/1, got values "
            f"{sorted(map(str, values.unique()))[:5]}"
        )


def fit_linear(formula: str, data: pd.DataFrame, cov_type: str = "nonrobust"):
    """Fit an OLS linear regression and return the statsmodels results."""
    _check_cov_type(cov_type)
    frame = model_frame(formula, data)
    logger.info("Fitting linear regression: %s", formula)
    return smf.ols(formula=formula, data=frame).fit(cov_type=cov_type)


def fit_logistic(formula: str, data: pd.DataFrame, cov_type: str = "nonrobust"):
    """Fit a logistic regression (maximum likelihood logit)."""
    _check_cov_type(cov_type)
    frame = model_frame(formula, data)
    outcome = outcome_name(formula)
    _check_binary(frame, outcome)
    if outcome in frame.columns:
        frame[outcome] = frame[outcome].astype(int)
    logger.info("Fitting logistic regression: %s", formula)
    return smf.logit(formula=formula, data=frame).fit(disp=False, cov_type=cov_type)


def fit_glm(formula: str, data: pd.DataFrame, family: str = "gaussian", link: str | None = None):
    """Fit a generalized linear model by IRLS.

    Parameters
    ----------
    formula : str
        Model formula.
    data : pandas.DataFrame
        Input data; rows with missing formula variables are dropped.
    family : str
        ``"gaussian"``, ``"binomial"`` or ``"poisson"``.
    link : str, optional
        ``"identity"``, ``"logit"``, ``"probit"`` or ``"log"``.  Defaults
        to the family's canonical link.
    """
    if family not in _FAMILIES:
        raise ValueError(f"Unknown family {family!r}; expected one of {sorted(_FAMILIES)}")
    if link is not None and link not in _LINKS:
        raise ValueError(f"Unknown link {link!r}; expected one of {sorted(_LINKS)}")

    frame = model_frame(formula, data)
    if family == "binomial":
        _check_binary(frame, outcome_name(formula))
    glm_family = _FAMILIES[family](link=_LINKS[link]()) if link else _FAMILIES[family]()
    logger.info("Fitting %s GLM: %s", family, formula)
    return smf.glm(formula=formula, data=frame, family=glm_family).fit()


def fit_model(spec, data: pd.DataFrame) -> FittedModel:
    """Fit the model described by a `config.ModelSpec`."""
    if spec.kind not in MODEL_KINDS:
        raise ValueError(f"Unknown model kind {spec.kind!r}; expected one of {MODEL_KINDS}")

    frame = model_frame(spec.formula, data)
    if spec.kind == "linear":
        result = fit_linear(spec.formula, frame, cov_type=spec.cov_type)
    else:
        result = fit_logistic(spec.formula, frame, cov_type=spec.cov_type)

    return FittedModel(
        name=spec.name,
        kind=spec.kind,
        formula=spec.formula,
        result=result,
        data=frame,
        focal=list(spec.focal),
        by=spec.by,
    )
