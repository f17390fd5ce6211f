"""Load the course datasets and summarise them before modelling."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

import pandas as pd

from ..utils.file_io import read_table

logger = logging.getLogger(__name__)


def load_dataset(
    path,
    categorical: Iterable[str] | None = None,
    dropna: Iterable[str] | None = None,
) -> pd.DataFrame:
    """Load a tabular dataset for modelling.

    Parameters
    ----------
    path : Path or str
        CSV, TSV, Stata, Parquet or Excel file.
    categorical : iterable of str, optional
        Columns to convert to the pandas ``category`` dtype.
    dropna : iterable of str, optional
        Drop rows with a missing value in any of these columns.

    Returns
    -------
    pandas.DataFrame
    """
    path = Path(path)
    df = read_table(path)
    logger.info("Loaded %s: %d rows x %d columns", path.name, len(df), df.shape[1])

    for col in categorical or []:
        if col not in df.columns:
            raise ValueError(f"Column '{col}' not found in {path.name}")
        df[col] = df[col].astype("category")

    if dropna:
        subset = list(dropna)
        before = len(df)
        df = df.dropna(subset=subset).reset_index(drop=True)
        if len(df) < before:
            logger.info("Dropped %d rows with missing %s", before - len(df), subset)
    return df


def describe_dataset(df: pd.DataFrame) -> pd.DataFrame:
    """One row of descriptive statistics per column."""
    rows = []
    for col in df.columns:
        series = df[col]
        row = {
            "variable": col,
            "dtype": str(series.dtype),
            "n": int(series.notna().sum()),
            "missing": int(series.isna().sum()),
            "mean": float("nan"),
            "sd": float("nan"),
            "min": float("nan"),
            "max": float("nan"),
            "levels": float("nan"),
        }
        if pd.api.types.is_numeric_dtype(series) and not pd.api.types.is_bool_dtype(series):
            row.update(
                mean=series.mean(),
                sd=series.std(),
                min=series.min(),
                max=series.max(),
            )
        else:
            row["levels"] = series.nunique(dropna=True)
        rows.append(row)
    return pd.DataFrame(rows)
