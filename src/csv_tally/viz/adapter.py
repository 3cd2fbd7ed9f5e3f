from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Sequence

from csv_tally.config import DEFAULT_PALETTE, ChartConfig
from csv_tally.features.categories import DEFAULT_TOP_N, CategoryStat, ChartDataItem, Tabulation


@dataclass(frozen=True)
class ChartPoint:
    name: str
    value: float
    display_value: float
    percentage: str
    color: str
    color_index: int
    is_other: bool = False
    is_active: bool = False


@dataclass(frozen=True)
class BreakdownEntry:
    name: str
    value: int
    percentage: str
    label: str
    color: str


def _color_index(index: int, item: ChartDataItem, palette: Sequence[str]) -> int:
    if item.is_other:
        return len(palette) - 1
    return index % len(palette)


def _display_value(
    item: ChartDataItem,
    *,
    emphasis: bool,
    is_active: bool,
    top_scale: float,
    others_scale: float,
) -> float:
    if not emphasis:
        return float(item.value)
    true_percentage = float(item.percentage)
    if is_active:
        return true_percentage
    return true_percentage * (others_scale if item.is_other else top_scale)


def build_chart_points(
    chart_data: Sequence[ChartDataItem],
    palette: Sequence[str] = DEFAULT_PALETTE,
    *,
    emphasis: bool = False,
    active_index: int | None = None,
    top_scale: float = 2.0,
    others_scale: float = 0.3,
) -> list[ChartPoint]:
    """Map chart entries to drawable points.

    With ``emphasis`` the displayed magnitude is the percentage scaled by
    ``top_scale`` for named categories and ``others_scale`` for the "Others"
    bucket; the entry at ``active_index`` shows its true percentage. Only
    ``display_value`` is rescaled.
    """
    points: list[ChartPoint] = []
    for index, item in enumerate(chart_data):
        is_active = active_index == index
        color_index = _color_index(index, item, palette)
        points.append(
            ChartPoint(
                name=item.name,
                value=float(item.value),
                display_value=_display_value(
                    item,
                    emphasis=emphasis,
                    is_active=is_active,
                    top_scale=top_scale,
                    others_scale=others_scale,
                ),
                percentage=item.percentage,
                color=palette[color_index],
                color_index=color_index,
                is_other=item.is_other,
                is_active=is_active,
            )
        )
    return points


def points_for_config(
    tabulation: Tabulation,
    config: ChartConfig,
    *,
    active_index: int | None = None,
) -> list[ChartPoint]:
    return build_chart_points(
        tabulation.chart_data,
        config.palette,
        emphasis=config.emphasis,
        active_index=active_index,
        top_scale=config.top_scale,
        others_scale=config.others_scale,
    )


def build_breakdown(
    all_categories: Sequence[CategoryStat],
    palette: Sequence[str] = DEFAULT_PALETTE,
    *,
    top_n: int = DEFAULT_TOP_N,
) -> list[BreakdownEntry]:
    entries: list[BreakdownEntry] = []
    for rank, category in enumerate(all_categories):
        color = palette[rank % len(palette)] if rank < top_n else palette[-1]
        entries.append(
            BreakdownEntry(
                name=category.name,
                value=category.value,
                percentage=category.percentage,
                label=f"{category.name}: {category.percentage}%",
                color=color,
            )
        )
    return entries


def chart_payload(
    points: Sequence[ChartPoint],
    breakdown: Sequence[BreakdownEntry],
    *,
    chart_type: str,
    column: str,
    palette: Sequence[str] = DEFAULT_PALETTE,
) -> dict[str, Any]:
    return {
        "column": column,
        "chart_type": chart_type,
        "palette": list(palette),
        "points": [asdict(point) for point in points],
        "breakdown": [asdict(entry) for entry in breakdown],
        "total": sum(entry.value for entry in breakdown),
    }
