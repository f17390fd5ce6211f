"""Tests for dataset loading, description and file helpers."""
import numpy as np
import pandas as pd
import pytest

from regression_walkthrough.data.loading import describe_dataset, load_dataset
from regression_walkthrough.data.sample_data import (
    REGIONS,
    make_earnings,
    make_turnout,
    write_sample_datasets,
)
from regression_walkthrough.utils.file_io import read_table, write_table


class TestReadTable:
    """Test suite for suffix-based table reading."""

    def test_reads_csv_and_stata(self, sample_files):
        """Test that both course formats load into DataFrames."""
        linear_path, logistic_path = sample_files

        earnings = read_table(linear_path)
        turnout = read_table(logistic_path)

        assert list(earnings.columns) == ["earnings", "education", "experience", "female", "region"]
        assert list(turnout.columns) == ["voted", "age", "education", "income", "partisan"]
        assert len(earnings) == 400
        assert len(turnout) == 800

    def test_reads_tab_separated(self, tmp_path):
        """Test that .tsv files are split on tabs."""
        path = tmp_path / "small.tsv"
        path.write_text("x\ty\n1\t2\n3\t4\n", encoding="utf-8")

        df = read_table(path)

        assert df.shape == (2, 2)
        assert df["y"].tolist() == [2, 4]

    def test_unsupported_suffix_raises(self, tmp_path):
        """Test that an unknown format is rejected."""
        path = tmp_path / "data.sav"
        path.write_bytes(b"")

        with pytest.raises(ValueError, match="Unsupported table format"):
            read_table(path)

    def test_missing_file_propagates(self, tmp_path):
        """Test that pandas' own error surfaces for a missing file."""
        with pytest.raises(FileNotFoundError):
            read_table(tmp_path / "absent.csv")


class TestWriteTable:
    """Test suite for suffix-based table writing."""

    @pytest.mark.parametrize("suffix", [".dta", ".tsv"])
    def test_reads_back_in_same_format(self, tmp_path, suffix):
        """Test that read_table picks up what write_table wrote."""
        df = pd.DataFrame({"x": [1, 2, 3], "g": ["a", "b", "a"]})
        path = tmp_path / "out" / f"small{suffix}"

        write_table(df, path)
        back = read_table(path)

        assert back["x"].tolist() == [1, 2, 3]
        assert back["g"].tolist() == ["a", "b", "a"]

    def test_unsupported_suffix_writes_nothing(self, tmp_path):
        path = tmp_path / "data.sav"

        with pytest.raises(ValueError, match="Unsupported table format"):
            write_table(pd.DataFrame({"x": [1]}), path)
        assert not path.exists()


class TestLoadDataset:
    """Test suite for load_dataset."""

    def test_categorical_conversion(self, sample_files):
        """Test that requested columns become pandas categoricals."""
        linear_path, _ = sample_files

        df = load_dataset(linear_path, categorical=["region"])

        assert isinstance(df["region"].dtype, pd.CategoricalDtype)
        assert set(df["region"].cat.categories) <= set(REGIONS)

    def test_unknown_categorical_column(self, sample_files):
        """Test that a typo in the categorical list is reported."""
        linear_path, _ = sample_files

        with pytest.raises(ValueError, match="not found"):
            load_dataset(linear_path, categorical=["regoin"])

    def test_dropna_removes_incomplete_rows(self, tmp_path):
        """Test that dropna only considers the listed columns."""
        path = tmp_path / "gaps.csv"
        pd.DataFrame(
            {"y": [1.0, np.nan, 3.0, 4.0], "x": [1.0, 2.0, np.nan, 4.0], "z": [np.nan] * 4}
        ).to_csv(path, index=False)

        df = load_dataset(path, dropna=["y", "x"])

        assert len(df) == 2
        assert df["y"].tolist() == [1.0, 4.0]


class TestDescribeDataset:
    """Test suite for describe_dataset."""

    def test_numeric_and_categorical_rows(self, earnings_df):
        """Test that numeric columns get moments and categorical ones get levels."""
        summary = describe_dataset(earnings_df).set_index("variable")

        assert list(summary.index) == list(earnings_df.columns)
        assert summary.loc["education", "mean"] == pytest.approx(earnings_df["education"].mean())
        assert summary.loc["education", "min"] >= 8
        assert np.isnan(summary.loc["education", "levels"])
        assert summary.loc["region", "levels"] == 4
        assert np.isnan(summary.loc["region", "mean"])

    def test_missing_counts(self):
        """Test that n and missing add up to the number of rows."""
        df = pd.DataFrame({"a": [1.0, None, 3.0], "b": ["x", "y", None]})

        summary = describe_dataset(df).set_index("variable")

        assert summary.loc["a", "n"] == 2
        assert summary.loc["a", "missing"] == 1
        assert summary.loc["b", "missing"] == 1


class TestSampleData:
    """Test suite for the simulated course datasets."""

    def test_earnings_is_reproducible(self):
        """Test that the same seed gives the same data."""
        pd.testing.assert_frame_equal(make_earnings(n=50, seed=3), make_earnings(n=50, seed=3))

    def test_turnout_outcome_is_binary(self):
        """Test that voted is coded 0/1."""
        df = make_turnout(n=300, seed=4)

        assert set(df["voted"].unique()) <= {0, 1}
        assert 0.2 < df["voted"].mean() < 0.95

    def test_write_sample_datasets(self, tmp_path):
        """Test that both files are written in the requested formats."""
        linear_path, logistic_path = write_sample_datasets(
            tmp_path / "raw" / "earnings.csv", tmp_path / "raw" / "turnout.dta"
        )

        assert linear_path.exists()
        assert logistic_path.exists()
        assert len(read_table(logistic_path)) == 1500

    def test_stata_linear_path(self, tmp_path):
        """Test that the earnings file follows its own suffix too."""
        linear_path, logistic_path = write_sample_datasets(
            tmp_path / "earnings.dta", tmp_path / "turnout.csv"
        )

        earnings = read_table(linear_path)
        turnout = read_table(logistic_path)

        assert len(earnings) == 1000
        assert "education" in earnings.columns
        assert set(turnout["voted"].unique()) <= {0, 1}

    def test_unsupported_suffix(self, tmp_path):
        with pytest.raises(ValueError, match="Unsupported table format"):
            write_sample_datasets(tmp_path / "earnings.sav", tmp_path / "turnout.dta")
