from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

TABLE_EXTENSIONS = {"csv": "csv", "parquet": "parquet"}


@dataclass(frozen=True)
class OutputPaths:
    root: Path
    tables: Path
    figures: Path
    summary: Path

    @property
    def tabulation_summary(self) -> Path:
        return self.summary / "tabulation.json"

    def frequency_table(self, tables_format: str) -> Path:
        return self.tables / f"category_frequency.{TABLE_EXTENSIONS.get(tables_format, 'csv')}"

    def chart(self, chart_type: str, figures_format: str) -> Path:
        return self.figures / f"category_{chart_type}.{figures_format}"


def build_output_paths(out_dir: Path) -> OutputPaths:
    """Create the report directory tree under ``out_dir``."""
    paths = OutputPaths(
        root=out_dir,
        tables=out_dir / "tables",
        figures=out_dir / "figures",
        summary=out_dir / "summary",
    )
    for directory in (paths.tables, paths.figures, paths.summary):
        directory.mkdir(parents=True, exist_ok=True)
    return paths
