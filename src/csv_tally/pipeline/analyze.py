from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from pathlib import Path

from csv_tally.config import AppConfig
from csv_tally.features.categories import Tabulation, category_frequency_table, tabulate
from csv_tally.io.read import Dataset, load_dataset
from csv_tally.io.write import write_summary, write_table
from csv_tally.paths import build_output_paths
from csv_tally.report.render import render_report
from csv_tally.viz.adapter import points_for_config
from csv_tally.viz.charts import plot_category_chart

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisArtifacts:
    column: str
    tabulation: Tabulation
    table_path: Path
    summary_path: Path
    figure_path: Path | None
    report_path: Path


def tabulate_column(dataset: Dataset, column: str, config: AppConfig) -> Tabulation:
    return tabulate(
        dataset,
        dataset.column_index(column),
        top_n=config.tabulation.top_n,
        others_label=config.tabulation.others_label,
    )


def _render_figure(
    tabulation: Tabulation,
    column: str,
    output_path: Path,
    config: AppConfig,
    chart_type: str,
) -> Path | None:
    try:
        return plot_category_chart(
            points_for_config(tabulation, config.chart),
            output_path,
            chart_type=chart_type,
            title=f"{column} Analysis",
            emphasis=config.chart.emphasis,
        )
    except Exception:  # pragma: no cover
        LOGGER.exception("Failed rendering %s chart for column %r", chart_type, column)
        return None


def analyze_column(
    csv_path: Path,
    column: str,
    out_dir: Path,
    config: AppConfig,
    *,
    chart_type: str | None = None,
) -> AnalysisArtifacts:
    """Tabulate one column and write its table, summary, chart and HTML report."""
    paths = build_output_paths(out_dir)
    dataset = load_dataset(csv_path, config.input)
    column_index = dataset.column_index(column)
    tabulation = tabulate_column(dataset, column, config)
    effective_chart_type = chart_type or config.chart.chart_type

    table_path = write_table(
        category_frequency_table(dataset, column_index),
        paths.frequency_table(config.outputs.tables_format),
        fmt=config.outputs.tables_format,
    )
    summary_path = write_summary(
        {
            "source": dataset.source,
            "column": column,
            "column_index": column_index,
            "rows_total": dataset.n_rows,
            "values_total": tabulation.total,
            "n_categories": len(tabulation.all_categories),
            "chart_data": [asdict(item) for item in tabulation.chart_data],
            "all_categories": [asdict(category) for category in tabulation.all_categories],
        },
        paths.tabulation_summary,
    )

    figure_path = None
    if not tabulation.is_empty:
        figure_path = _render_figure(
            tabulation,
            column,
            paths.chart(effective_chart_type, config.outputs.figures_format),
            config,
            effective_chart_type,
        )

    report_path = render_report(
        tabulation,
        column,
        Path(dataset.source).name,
        paths.root,
        config,
        figure_path=figure_path,
        chart_type=effective_chart_type,
    )
    LOGGER.info("Analysis of %r complete: %s", column, report_path)
    return AnalysisArtifacts(
        column=column,
        tabulation=tabulation,
        table_path=table_path,
        summary_path=summary_path,
        figure_path=figure_path,
        report_path=report_path,
    )
