from __future__ import annotations

import json
import math
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape

from csv_tally.config import AppConfig
from csv_tally.features.categories import Tabulation
from csv_tally.viz.adapter import build_breakdown, chart_payload, points_for_config


def _template_env() -> Environment:
    templates_path = Path(__file__).resolve().parent / "templates"
    return Environment(
        loader=FileSystemLoader(str(templates_path)),
        autoescape=select_autoescape(enabled_extensions=("html", "xml", "j2")),
        trim_blocks=True,
        lstrip_blocks=True,
    )


def _json_safe(value: Any) -> Any:
    if isinstance(value, dict):
        return {str(key): _json_safe(nested) for key, nested in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(nested) for nested in value]
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if hasattr(value, "item"):
        return value.item()
    return value


def build_report_payload(
    tabulation: Tabulation,
    column: str,
    config: AppConfig,
    chart_type: str | None = None,
) -> dict[str, Any]:
    effective_chart_type = chart_type or config.chart.chart_type
    points = points_for_config(tabulation, config.chart)
    breakdown = build_breakdown(
        tabulation.all_categories,
        config.chart.palette,
        top_n=config.tabulation.top_n,
    )
    return _json_safe(
        chart_payload(
            points,
            breakdown,
            chart_type=effective_chart_type,
            column=column,
            palette=config.chart.palette,
        )
    )


def render_report(
    tabulation: Tabulation,
    column: str,
    source_name: str,
    out_dir: Path,
    config: AppConfig,
    *,
    figure_path: Path | None = None,
    chart_type: str | None = None,
) -> Path:
    env = _template_env()
    template = env.get_template("report.html.j2")
    payload = build_report_payload(tabulation, column, config, chart_type=chart_type)

    figure_src = None
    if figure_path is not None:
        try:
            figure_src = figure_path.relative_to(out_dir).as_posix()
        except ValueError:
            figure_src = figure_path.as_posix()

    rendered = template.render(
        generated_at=datetime.now(timezone.utc).isoformat(),
        column=column,
        source_name=source_name,
        chart_type=payload["chart_type"],
        total=payload["total"],
        breakdown=payload["breakdown"],
        points=payload["points"],
        figure_src=figure_src,
        payload_json=json.dumps(payload, indent=2, ensure_ascii=False).replace("</", "<\\/"),
    )

    report_path = out_dir / "report.html"
    report_path.parent.mkdir(parents=True, exist_ok=True)
    report_path.write_text(rendered, encoding="utf-8")
    return report_path
