"""
Regression Walkthrough Package

This package walks through fitting linear and logistic regression
models, extracting tidy summaries from them, and drawing coefficient
and marginal effects plots, rendered together as one HTML document.
Modules are organised by step and can be used independently or
orchestrated together through the high‑level pipeline functions.
"""

from . import config  # noqa: F401
from . import pipelines  # noqa: F401

__all__ = [
    "config",
    "pipelines",
]
