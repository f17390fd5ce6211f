"""
Subpackage for loading the course datasets.

`loading` reads the tabular files the walkthrough is built on and
prints their descriptive statistics; `sample_data` simulates stand-in
datasets with the same columns.
"""

__all__ = ["loading", "sample_data"]
