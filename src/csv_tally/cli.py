from __future__ import annotations

import json
from dataclasses import asdict
from enum import Enum
from pathlib import Path

import pyperclip
import typer

from csv_tally.config import AppConfig, load_config
from csv_tally.errors import CsvTallyError
from csv_tally.export.clipboard import ConsoleNotifier, copy_to_clipboard, export_sample
from csv_tally.io.read import Dataset, load_dataset
from csv_tally.io.write import write_text
from csv_tally.logging import configure_logging
from csv_tally.pipeline.analyze import analyze_column, tabulate_column
from csv_tally.viz.adapter import build_breakdown, points_for_config
from csv_tally.viz.charts import plot_category_chart

app = typer.Typer(no_args_is_help=True, add_completion=False)

CONFIG_HELP = "YAML config file. Built-in defaults apply when omitted."


class ChartChoice(str, Enum):
    bar = "bar"
    pie = "pie"


class OutputFormat(str, Enum):
    table = "table"
    json = "json"


def _load_app_config(config_path: Path | None) -> AppConfig:
    return load_config(config_path)


def _write_clipboard(text: str) -> None:
    pyperclip.copy(text)


def _load_dataset_or_fail(csv: Path, cfg: AppConfig) -> Dataset:
    try:
        return load_dataset(csv, cfg.input)
    except CsvTallyError as exc:
        raise typer.BadParameter(str(exc), param_hint="--csv") from exc


@app.command()
def columns(
    csv: Path = typer.Option(..., exists=True, readable=True, resolve_path=True),
    config: Path | None = typer.Option(
        None, exists=True, readable=True, resolve_path=True, help=CONFIG_HELP
    ),
) -> None:
    """List the header columns of a CSV file."""
    cfg = _load_app_config(config)
    configure_logging(cfg.logging.level)
    dataset = _load_dataset_or_fail(csv, cfg)
    for index, name in enumerate(dataset.display_columns()):
        typer.echo(f"{index}: {name}")
    typer.echo(f"{dataset.n_rows} data rows")


@app.command()
def tabulate(
    csv: Path = typer.Option(..., exists=True, readable=True, resolve_path=True),
    column: str = typer.Option(..., help="Header name of the column to tabulate."),
    config: Path | None = typer.Option(
        None, exists=True, readable=True, resolve_path=True, help=CONFIG_HELP
    ),
    output_format: OutputFormat = typer.Option(OutputFormat.table, "--format"),
    chart: ChartChoice | None = typer.Option(
        None, help="Chart type for --figure. Falls back to chart.chart_type."
    ),
    figure: Path | None = typer.Option(None, resolve_path=True, help="Write the chart here."),
) -> None:
    """Print value frequencies of one column, with the top categories and 'Others'."""
    cfg = _load_app_config(config)
    configure_logging(cfg.logging.level)
    dataset = _load_dataset_or_fail(csv, cfg)
    try:
        tabulation = tabulate_column(dataset, column, cfg)
    except CsvTallyError as exc:
        raise typer.BadParameter(str(exc), param_hint="--column") from exc

    if output_format == OutputFormat.json:
        typer.echo(
            json.dumps(
                {
                    "column": column,
                    "chart_data": [asdict(item) for item in tabulation.chart_data],
                    "all_categories": [asdict(item) for item in tabulation.all_categories],
                },
                indent=2,
                ensure_ascii=False,
            )
        )
    elif tabulation.is_empty:
        typer.echo(f"No values found in column {column!r}")
    else:
        typer.echo(f"{column} Analysis ({tabulation.total} entries)")
        typer.echo("Chart data:")
        for item in tabulation.chart_data:
            typer.echo(f"- {item.name}: {item.percentage}%")
        typer.echo("Category Breakdown:")
        for entry in build_breakdown(
            tabulation.all_categories, cfg.chart.palette, top_n=cfg.tabulation.top_n
        ):
            typer.echo(f"- {entry.label} ({entry.value})")

    if figure is not None:
        written = plot_category_chart(
            points_for_config(tabulation, cfg.chart),
            figure,
            chart_type=chart.value if chart else cfg.chart.chart_type,
            title=f"{column} Analysis",
            emphasis=cfg.chart.emphasis,
        )
        if written is None:
            typer.echo("Nothing to chart; figure not written", err=True)
        else:
            typer.echo(f"Figure written to: {written}", err=output_format == OutputFormat.json)


@app.command()
def copy(
    csv: Path = typer.Option(..., exists=True, readable=True, resolve_path=True),
    column: str = typer.Option(..., help="Header name of the column to sample."),
    config: Path | None = typer.Option(
        None, exists=True, readable=True, resolve_path=True, help=CONFIG_HELP
    ),
    count: int | None = typer.Option(
        None, help="Number of entries to export. Falls back to sampling.copy_count."
    ),
    include_case_number: bool | None = typer.Option(
        None,
        "--include-case-number/--no-case-number",
        help="Emit '<value><TAB><case id>' lines from the case number column.",
    ),
    seed: int | None = typer.Option(None, help="Seed for the random filler categories."),
    output: Path | None = typer.Option(
        None, resolve_path=True, help="Write the export to a file instead of the clipboard."
    ),
    stdout: bool = typer.Option(False, "--stdout", help="Print the export instead of copying."),
) -> None:
    """Export a weighted sample of a column, ready to paste into a spreadsheet."""
    cfg = _load_app_config(config)
    configure_logging(cfg.logging.level)
    notifier = ConsoleNotifier()
    try:
        dataset = load_dataset(csv, cfg.input)
    except CsvTallyError as exc:
        notifier.error("Error", str(exc))
        raise typer.Exit(code=1) from exc

    copy_count = cfg.sampling.copy_count if count is None else count
    result = export_sample(
        dataset,
        column,
        copy_count,
        cfg.sampling.include_case_number if include_case_number is None else include_case_number,
        notifier,
        case_number_column=cfg.columns.case_number,
        seed=cfg.sampling.random_seed if seed is None else seed,
        distribution=cfg.sampling.distribution,
    )
    if result is None:
        raise typer.Exit(code=1)

    if stdout:
        typer.echo(result.text)
        return
    if output is not None:
        write_text(result.text, output)
        notifier.success("Success", f"{result.emitted} entries written to {output}")
        return
    if not copy_to_clipboard(
        result.text, notifier, entries=result.emitted, writer=_write_clipboard
    ):
        raise typer.Exit(code=1)


@app.command()
def report(
    csv: Path = typer.Option(..., exists=True, readable=True, resolve_path=True),
    column: str = typer.Option(..., help="Header name of the column to analyze."),
    out: Path = typer.Option(Path("out"), resolve_path=True),
    config: Path | None = typer.Option(
        None, exists=True, readable=True, resolve_path=True, help=CONFIG_HELP
    ),
    chart: ChartChoice | None = typer.Option(
        None, help="Chart type. Falls back to chart.chart_type."
    ),
) -> None:
    """Write the frequency table, chart and HTML report for one column."""
    cfg = _load_app_config(config)
    configure_logging(cfg.logging.level)
    try:
        artifacts = analyze_column(
            csv, column, out, cfg, chart_type=chart.value if chart else None
        )
    except CsvTallyError as exc:
        raise typer.BadParameter(str(exc)) from exc
    typer.echo(f"Report written to: {artifacts.report_path}")


if __name__ == "__main__":
    app()
