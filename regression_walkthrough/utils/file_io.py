"""File input/output helper functions."""

import logging
from pathlib import Path

import pandas as pd

logger = logging.getLogger(__name__)

# Suffix -> pandas reader for the tabular formats the course datasets ship in
_TABLE_READERS = {
    ".csv": pd.read_csv,
    ".tsv": lambda path: pd.read_csv(path, sep="\t"),
    ".tab": lambda path: pd.read_csv(path, sep="\t"),
    # upcast Stata byte/int columns; I(x ** 2) on int8 data overflows
    ".dta": lambda path: pd.read_stata(path, preserve_dtypes=False),
    ".parquet": pd.read_parquet,
    ".xlsx": pd.read_excel,
}

# Suffix -> writer, mirroring the readers above
_TABLE_WRITERS = {
    ".csv": lambda df, path: df.to_csv(path, index=False),
    ".tsv": lambda df, path: df.to_csv(path, sep="\t", index=False),
    ".tab": lambda df, path: df.to_csv(path, sep="\t", index=False),
    ".dta": lambda df, path: df.to_stata(path, write_index=False, version=118),
    ".parquet": lambda df, path: df.to_parquet(path, index=False),
    ".xlsx": lambda df, path: df.to_excel(path, index=False),
}


def write_csv(df, path, index=False):
    """Write a DataFrame to a CSV file."""
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(path, index=index)
    except Exception as exc:
        logger.error("Failed to write CSV file %s: %s", path, exc)
        raise


def write_text(text, path):
    """Write a string to a UTF-8 text file."""
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            f.write(text)
    except Exception as exc:
        logger.error("Failed to write text file %s: %s", path, exc)
        raise


def read_table(path):
    """Read a tabular data file, picking the reader from the file suffix.

    Supported formats are CSV, tab-separated text, Stata (``.dta``),
    Parquet and Excel.  Any other suffix raises ``ValueError``.
    """
    path = Path(path)
    reader = _TABLE_READERS.get(path.suffix.lower())
    if reader is None:
        raise ValueError(
            f"Unsupported table format '{path.suffix}' for {path}; "
            f"expected one of {sorted(_TABLE_READERS)}"
        )
    try:
        return reader(path)
    except Exception as exc:
        logger.error("Failed to read table %s: %s", path, exc)
        raise


def write_table(df, path):
    """Write a DataFrame in the format named by the file suffix.

    Accepts the same suffixes as `read_table`; any other raises
    ``ValueError`` before anything is written.
    """
    path = Path(path)
    writer = _TABLE_WRITERS.get(path.suffix.lower())
    if writer is None:
        raise ValueError(
            f"Unsupported table format '{path.suffix}' for {path}; "
            f"expected one of {sorted(_TABLE_WRITERS)}"
        )
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        writer(df, path)
    except Exception as exc:
        logger.error("Failed to write table %s: %s", path, exc)
        raise
