"""
High‑level pipeline orchestration functions.

Each function in this module runs one part of the walkthrough: load a
dataset, fit the configured models, extract tidy summaries, draw the
coefficient and marginal effects plots, and append everything to the
HTML report.  The functions call into the lower‑level modules defined
in `data`, `models`, `analysis` and `reporting`.  Use them from the
command line (`regression_walkthrough.cli`) or import them into your
own scripts/notebooks.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from . import config
from .analysis import visualizations
from .data.loading import describe_dataset, load_dataset
from .models.comparison import regression_table
from .models.fitting import FittedModel, fit_model
from .models.predictions import average_marginal_effects, marginal_effects
from .models.tidy import glance, tidy
from .reporting.html_report import ReportBuilder
from .utils.file_io import write_csv

KIND_TITLES = {
    "linear": "Linear regression",
    "logistic": "Logistic regression",
}


def _load_if_present(dataset_path: Path) -> pd.DataFrame | None:
    if not dataset_path.exists():
        logging.error("Dataset not found at %s", dataset_path)
        return None
    return load_dataset(dataset_path)


def _add_model_section(
    builder: ReportBuilder,
    fitted: FittedModel,
    conf_level: float,
    n_points: int,
) -> None:
    builder.add_section(f"Model '{fitted.name}'", level=3)
    builder.add_paragraph(f"Formula: {fitted.formula} (n = {len(fitted.data):,})")
    builder.add_preformatted(fitted.result.summary().as_text())

    builder.add_table(tidy(fitted, conf_level=conf_level), caption=f"Coefficients ({conf_level:.0%} CI)")
    builder.add_table(glance(fitted), caption="Model fit")

    if fitted.is_logistic:
        builder.add_table(
            tidy(fitted, conf_level=conf_level, exponentiate=True),
            caption="Odds ratios",
        )
        builder.add_table(
            average_marginal_effects(fitted, conf_level=conf_level),
            caption="Average marginal effects on the predicted probability",
        )

    outcome_label = f"P({fitted.outcome} = 1)" if fitted.is_logistic else f"Predicted {fitted.outcome}"
    for focal in fitted.focal:
        predictions = marginal_effects(
            fitted,
            focal,
            n_points=n_points,
            by=fitted.by,
            conf_level=conf_level,
        )
        fig = visualizations.marginal_effects_plot(
            predictions,
            focal,
            by=fitted.by,
            outcome_label=outcome_label,
            title=f"{fitted.name}: predicted {fitted.outcome} by {focal}",
        )
        builder.add_figure(fig, caption=f"Marginal effect of {focal}, other covariates at mean/mode")

    builder.add_figure(visualizations.diagnostic_plots(fitted), caption="Residual diagnostics")


def _run_half(
    kind: str,
    dataset_path,
    specs,
    builder: ReportBuilder,
    conf_level: float,
    results_dir: Path,
    n_points: int,
) -> dict[str, FittedModel] | None:
    if n_points < 2:
        raise ValueError(f"n_points must be at least 2, got {n_points}")
    dataset_path = Path(dataset_path)
    df = _load_if_present(dataset_path)
    if df is None:
        return None

    builder.add_section(f"{KIND_TITLES[kind]}: {dataset_path.name}")
    builder.add_paragraph(
        f"{len(df):,} observations of {df.shape[1]} variables loaded from {dataset_path.name}."
    )
    builder.add_table(describe_dataset(df), caption="Descriptive statistics")
    if not df.select_dtypes(include="number").empty:
        builder.add_figure(visualizations.distribution_plots(df), caption="Distributions of numeric variables")

    logging.info("Fitting %d %s models on %s…", len(specs), kind, dataset_path.name)
    fitted_models = {spec.name: fit_model(spec, df) for spec in specs}

    for fitted in fitted_models.values():
        _add_model_section(builder, fitted, conf_level, n_points)
        write_csv(
            tidy(fitted, conf_level=conf_level),
            results_dir / f"tidy_{dataset_path.stem}_{fitted.name}.csv",
        )

    builder.add_section(f"Comparing the {kind} models", level=3)
    builder.add_figure(
        visualizations.coefficient_plot(fitted_models, conf_level=conf_level, title=f"{KIND_TITLES[kind]} coefficients"),
        caption=f"Estimates with {conf_level:.0%} confidence intervals",
    )
    if kind == "logistic":
        builder.add_figure(
            visualizations.coefficient_plot(
                fitted_models, conf_level=conf_level, exponentiate=True, title="Odds ratios"
            ),
            caption="Exponentiated coefficients on a log scale",
        )

    table = regression_table(fitted_models, conf_level=conf_level)
    builder.add_table(table, caption="Regression table (standard errors in parentheses)", index=True)
    write_csv(table, results_dir / f"regression_table_{dataset_path.stem}.csv", index=True)
    return fitted_models


def run_linear_walkthrough(
    dataset_path=None,
    specs=None,
    builder: ReportBuilder | None = None,
    conf_level: float = config.CONFIDENCE_LEVEL,
    results_dir=None,
    n_points: int = config.PREDICTION_POINTS,
) -> dict[str, FittedModel] | None:
    """Fit and summarise the linear regression models.

    Returns the fitted models keyed by name, or ``None`` when the
    dataset is missing.  Sections are appended to `builder` (a fresh
    one is created if none is given).
    """
    return _run_half(
        "linear",
        dataset_path or config.LINEAR_DATASET,
        specs if specs is not None else config.DEFAULT_LINEAR_MODELS,
        builder or ReportBuilder(config.REPORT_TITLE),
        conf_level,
        Path(results_dir or config.RESULTS_DIR),
        n_points,
    )


def run_logistic_walkthrough(
    dataset_path=None,
    specs=None,
    builder: ReportBuilder | None = None,
    conf_level: float = config.CONFIDENCE_LEVEL,
    results_dir=None,
    n_points: int = config.PREDICTION_POINTS,
) -> dict[str, FittedModel] | None:
    """Fit and summarise the logistic regression models.

    In addition to the linear walkthrough's output this adds odds
    ratios and average marginal effects for every model.
    """
    return _run_half(
        "logistic",
        dataset_path or config.LOGISTIC_DATASET,
        specs if specs is not None else config.DEFAULT_LOGISTIC_MODELS,
        builder or ReportBuilder(config.REPORT_TITLE),
        conf_level,
        Path(results_dir or config.RESULTS_DIR),
        n_points,
    )


def run_walkthrough(
    linear_path=None,
    logistic_path=None,
    output_path=None,
    linear_specs=None,
    logistic_specs=None,
    conf_level: float = config.CONFIDENCE_LEVEL,
    results_dir=None,
    n_points: int = config.PREDICTION_POINTS,
) -> Path | None:
    """Run both halves of the walkthrough and write the HTML report.

    Tidy coefficient tables, the combined `glance.csv` and one
    regression table per dataset are written to `results_dir`.
    Returns the report path, or ``None`` if neither dataset could be
    loaded.
    """
    results_dir = Path(results_dir or config.RESULTS_DIR)
    output_path = Path(output_path or results_dir / config.REPORT_PATH.name)
    builder = ReportBuilder(config.REPORT_TITLE, dpi=config.FIGURE_DPI)

    logging.info("Running linear regression walkthrough…")
    linear = run_linear_walkthrough(
        linear_path, linear_specs, builder, conf_level, results_dir, n_points
    )

    logging.info("Running logistic regression walkthrough…")
    logistic = run_logistic_walkthrough(
        logistic_path, logistic_specs, builder, conf_level, results_dir, n_points
    )

    if linear is None and logistic is None:
        logging.error("No dataset could be loaded; nothing to report.")
        return None

    fit_rows = []
    for kind, fitted_models in (("linear", linear), ("logistic", logistic)):
        for name, fitted in (fitted_models or {}).items():
            row = glance(fitted)
            row.insert(0, "model", name)
            row.insert(0, "kind", kind)
            fit_rows.append(row)
    write_csv(pd.concat(fit_rows, ignore_index=True), results_dir / "glance.csv")

    return builder.write(output_path)
