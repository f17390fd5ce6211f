"""End-to-end tests for the walkthrough pipeline and CLI."""
import pandas as pd
import pytest

from regression_walkthrough.cli import main
from regression_walkthrough.config import ModelSpec
from regression_walkthrough.pipelines import (
    run_linear_walkthrough,
    run_logistic_walkthrough,
    run_walkthrough,
)
from regression_walkthrough.reporting.html_report import ReportBuilder

LINEAR_SPECS = [
    ModelSpec(name="bivariate", kind="linear", formula="earnings ~ education", focal=["education"]),
    ModelSpec(
        name="interaction",
        kind="linear",
        formula="earnings ~ education * female + C(region)",
        focal=["education"],
        by="female",
        cov_type="HC1",
    ),
]

LOGISTIC_SPECS = [
    ModelSpec(
        name="full",
        kind="logistic",
        formula="voted ~ age + education + C(partisan)",
        focal=["age", "partisan"],
    ),
]


class TestRunHalves:
    """Test suite for the linear and logistic halves."""

    def test_linear_half(self, sample_files, tmp_path):
        linear_path, _ = sample_files
        builder = ReportBuilder("test")

        fitted = run_linear_walkthrough(
            linear_path, LINEAR_SPECS, builder, results_dir=tmp_path / "results", n_points=5
        )

        assert set(fitted) == {"bivariate", "interaction"}
        assert (tmp_path / "results" / "tidy_earnings_bivariate.csv").exists()
        table = pd.read_csv(tmp_path / "results" / "regression_table_earnings.csv", index_col=0)
        assert list(table.columns) == ["bivariate", "interaction"]
        headings = [s.heading for s in builder.sections]
        assert headings[0] == "Linear regression: earnings.csv"
        assert "Comparing the linear models" in headings

    def test_logistic_half_adds_odds_ratios(self, sample_files, tmp_path):
        _, logistic_path = sample_files
        builder = ReportBuilder("test")

        fitted = run_logistic_walkthrough(
            logistic_path, LOGISTIC_SPECS, builder, results_dir=tmp_path, n_points=5
        )

        assert fitted["full"].is_logistic
        page = builder.render()
        assert "Odds ratios" in page
        assert "Average marginal effects" in page

    def test_too_few_points_fails_before_writing(self, sample_files, tmp_path):
        linear_path, _ = sample_files
        results = tmp_path / "results"

        with pytest.raises(ValueError, match="n_points"):
            run_linear_walkthrough(linear_path, LINEAR_SPECS, ReportBuilder("test"), results_dir=results, n_points=1)
        assert not results.exists()

    def test_missing_dataset_returns_none(self, tmp_path):
        builder = ReportBuilder("test")

        assert run_linear_walkthrough(tmp_path / "absent.csv", LINEAR_SPECS, builder, results_dir=tmp_path) is None
        assert builder.sections == []


class TestRunWalkthrough:
    """Test suite for the full walkthrough."""

    def test_writes_report_and_tables(self, sample_files, tmp_path):
        linear_path, logistic_path = sample_files
        results = tmp_path / "results"

        report = run_walkthrough(
            linear_path,
            logistic_path,
            output_path=results / "walkthrough.html",
            linear_specs=LINEAR_SPECS,
            logistic_specs=LOGISTIC_SPECS,
            results_dir=results,
            n_points=5,
        )

        assert report == results / "walkthrough.html"
        page = report.read_text(encoding="utf-8")
        assert "Linear regression: earnings.csv" in page
        assert "Logistic regression: turnout.dta" in page
        glance = pd.read_csv(results / "glance.csv")
        assert glance["model"].tolist() == ["bivariate", "interaction", "full"]
        assert glance["kind"].tolist() == ["linear", "linear", "logistic"]

    def test_one_dataset_is_enough(self, sample_files, tmp_path):
        linear_path, _ = sample_files

        report = run_walkthrough(
            linear_path,
            tmp_path / "absent.dta",
            linear_specs=LINEAR_SPECS,
            logistic_specs=LOGISTIC_SPECS,
            results_dir=tmp_path,
            n_points=5,
        )

        assert report is not None
        assert "Logistic regression" not in report.read_text(encoding="utf-8")

    def test_nothing_to_report(self, tmp_path):
        assert run_walkthrough(tmp_path / "a.csv", tmp_path / "b.dta", results_dir=tmp_path) is None


class TestCli:
    """Test suite for the command-line entry point."""

    def test_sample_data_run(self, tmp_path):
        code = main(
            [
                "--make-sample-data",
                "--linear-data", str(tmp_path / "raw" / "earnings.csv"),
                "--logistic-data", str(tmp_path / "raw" / "turnout.dta"),
                "--results-dir", str(tmp_path / "results"),
                "--output", str(tmp_path / "results" / "report.html"),
                "--points", "5",
            ]
        )

        assert code == 0
        assert (tmp_path / "results" / "report.html").exists()
        assert (tmp_path / "raw" / "turnout.dta").exists()

    def test_missing_data_exit_code(self, tmp_path):
        code = main(
            [
                "--linear-data", str(tmp_path / "none.csv"),
                "--logistic-data", str(tmp_path / "none.dta"),
                "--results-dir", str(tmp_path),
            ]
        )

        assert code == 2

    def test_rejects_bad_confidence_level(self):
        with pytest.raises(SystemExit):
            main(["--conf-level", "95"])

    @pytest.mark.parametrize("points", ["1", "0", "many"])
    def test_rejects_bad_points(self, points):
        with pytest.raises(SystemExit):
            main(["--points", points])

    def test_stata_linear_sample_data(self, tmp_path):
        """Test a run whose earnings file is requested in Stata format."""
        code = main(
            [
                "--make-sample-data",
                "--linear-data", str(tmp_path / "raw" / "earnings.dta"),
                "--logistic-data", str(tmp_path / "raw" / "turnout.csv"),
                "--results-dir", str(tmp_path / "results"),
                "--output", str(tmp_path / "results" / "report.html"),
                "--points", "5",
            ]
        )

        assert code == 0
        assert (tmp_path / "results" / "tidy_earnings_bivariate.csv").exists()
        assert (tmp_path / "results" / "regression_table_turnout.csv").exists()
