from __future__ import annotations

from pathlib import Path
from typing import Sequence

import matplotlib.pyplot as plt
import numpy as np

from csv_tally.viz.adapter import ChartPoint
from csv_tally.viz.common import save_figure


def bar_label(point: ChartPoint) -> str:
    # "Others" carries a summed percentage, not an entry count.
    if point.is_other:
        return f"{point.percentage}%"
    return f"{round(point.value)}"


def value_axis_label(emphasis: bool) -> str:
    return "Share of entries (scaled %)" if emphasis else "Entries"


def plot_category_bar(
    points: Sequence[ChartPoint],
    output_path: Path,
    title: str = "Category distribution",
    emphasis: bool = False,
) -> Path | None:
    if not points:
        return None
    x = np.arange(len(points), dtype=float)
    heights = [point.display_value for point in points]
    figure, ax = plt.subplots(figsize=(10, 5))
    bars = ax.bar(
        x,
        heights,
        color=[point.color for point in points],
        edgecolor=["#333333" if point.is_active else "none" for point in points],
    )
    for bar, point in zip(bars, points):
        ax.annotate(
            bar_label(point),
            xy=(bar.get_x() + bar.get_width() / 2.0, bar.get_height()),
            ha="center",
            va="bottom",
            fontsize=9,
        )
    ax.grid(axis="y", linestyle="--", alpha=0.4)
    ax.set_title(title)
    ax.set_ylabel(value_axis_label(emphasis))
    ax.set_xticks(x)
    ax.set_xticklabels([point.name for point in points], rotation=20, ha="right")
    return save_figure(figure, output_path)


def plot_category_pie(
    points: Sequence[ChartPoint],
    output_path: Path,
    title: str = "Category distribution",
) -> Path | None:
    sizes = np.asarray([point.display_value for point in points], dtype=float)
    if not points or not np.isfinite(sizes).all() or sizes.sum() <= 0:
        return None
    shares = sizes / sizes.sum() * 100.0
    labels = [f"{point.name}: {share:.0f}%" for point, share in zip(points, shares)]
    explode = [0.06 if point.is_active else 0.0 for point in points]

    figure, ax = plt.subplots(figsize=(7, 7))
    ax.pie(
        sizes,
        labels=labels,
        colors=[point.color for point in points],
        explode=explode,
        startangle=90,
        counterclock=False,
        wedgeprops={"linewidth": 1, "edgecolor": "white"},
    )
    ax.axis("equal")
    ax.set_title(title)
    return save_figure(figure, output_path)


def plot_category_chart(
    points: Sequence[ChartPoint],
    output_path: Path,
    chart_type: str = "bar",
    title: str = "Category distribution",
    emphasis: bool = False,
) -> Path | None:
    if chart_type == "pie":
        return plot_category_pie(points, output_path, title=title)
    if chart_type == "bar":
        return plot_category_bar(points, output_path, title=title, emphasis=emphasis)
    raise ValueError(f"Unsupported chart type: {chart_type}")
