"""
Subpackage for visualising fitted models.

This package contains the coefficient, marginal effects, diagnostic
and distribution plots used throughout the walkthrough.
"""

__all__ = ["visualizations"]
