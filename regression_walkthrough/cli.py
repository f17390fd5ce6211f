"""Command-line entry point for the regression walkthrough.

Examples (run from project root)
    # Simulate the two course datasets, then build the report
    python -m regression_walkthrough.cli --make-sample-data

    # Point at your own data and use 90% intervals
    python -m regression_walkthrough.cli --linear-data data/raw/earnings.csv \
        --logistic-data data/raw/turnout.dta --conf-level 0.9 --output results/report.html
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

import matplotlib

matplotlib.use("Agg")

from . import config  # noqa: E402
from .data.sample_data import write_sample_datasets  # noqa: E402
from .pipelines import run_walkthrough  # noqa: E402

logger = logging.getLogger(__name__)


def conf_level_type(value: str) -> float:
    level = float(value)
    if not 0 < level < 1:
        raise argparse.ArgumentTypeError(f"confidence level must be between 0 and 1, got {value}")
    return level


def points_type(value: str) -> int:
    points = int(value)
    if points < 2:
        raise argparse.ArgumentTypeError(f"need at least 2 grid points, got {value}")
    return points


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Fit linear and logistic regressions and render an HTML walkthrough."
    )
    parser.add_argument("--linear-data", type=Path, default=config.LINEAR_DATASET, help="Dataset for the linear models")
    parser.add_argument(
        "--logistic-data", type=Path, default=config.LOGISTIC_DATASET, help="Dataset for the logistic models"
    )
    parser.add_argument("--output", type=Path, default=config.REPORT_PATH, help="Path of the HTML report")
    parser.add_argument("--results-dir", type=Path, default=config.RESULTS_DIR, help="Where CSV tables are written")
    parser.add_argument(
        "--conf-level", type=conf_level_type, default=config.CONFIDENCE_LEVEL, help="Confidence level for intervals"
    )
    parser.add_argument(
        "--points", type=points_type, default=config.PREDICTION_POINTS, help="Grid points along numeric focal variables"
    )
    parser.add_argument(
        "--make-sample-data",
        action="store_true",
        help="Write simulated earnings/turnout datasets to the data paths first",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
    )

    try:
        if args.make_sample_data:
            write_sample_datasets(args.linear_data, args.logistic_data)

        report = run_walkthrough(
            linear_path=args.linear_data,
            logistic_path=args.logistic_data,
            output_path=args.output,
            conf_level=args.conf_level,
            results_dir=args.results_dir,
            n_points=args.points,
        )
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130

    if report is None:
        return 2
    logger.info("Report written to %s", report)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
