"""
Subpackage for fitting regression models and extracting results.

`fitting` wraps the statsmodels formula API for linear and logistic
regression, `tidy` turns a fitted model into per-term, per-model and
per-observation tables, `predictions` computes predicted values for
marginal effects plots, and `comparison` lays several models out side
by side.
"""

__all__ = ["fitting", "tidy", "predictions", "comparison"]
