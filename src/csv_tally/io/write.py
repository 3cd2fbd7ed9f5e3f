from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pandas as pd


def _ensure_parent(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def write_table(frame: pd.DataFrame, path: Path, fmt: str = "csv") -> Path:
    """Write a frequency table as csv (spreadsheet friendly) or parquet."""
    if fmt not in {"csv", "parquet"}:
        raise ValueError(f"Unsupported table format: {fmt}")
    _ensure_parent(path)
    if fmt == "parquet":
        frame.to_parquet(path, index=False)
    else:
        frame.to_csv(path, index=False, encoding="utf-8")
    return path


def write_summary(data: dict[str, Any], path: Path) -> Path:
    # Category names are free text; keep them readable in the JSON.
    _ensure_parent(path).write_text(
        json.dumps(data, indent=2, sort_keys=True, ensure_ascii=False),
        encoding="utf-8",
    )
    return path


def write_text(text: str, path: Path) -> Path:
    """Write an export so it can be opened or pasted as-is."""
    _ensure_parent(path).write_text(f"{text}\n" if text else "", encoding="utf-8")
    return path
