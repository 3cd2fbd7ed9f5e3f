from __future__ import annotations

import logging
from dataclasses import dataclass

import pandas as pd

from csv_tally.io.read import Dataset

LOGGER = logging.getLogger(__name__)

DEFAULT_TOP_N = 3
OTHERS_LABEL = "Others"
RANKED_COLUMNS = ["category", "n", "first_seen_row", "rank"]


@dataclass(frozen=True)
class CategoryStat:
    name: str
    value: int
    percentage: str


@dataclass(frozen=True)
class ChartDataItem:
    name: str
    value: float
    percentage: str
    is_other: bool = False


@dataclass(frozen=True)
class Tabulation:
    chart_data: tuple[ChartDataItem, ...]
    all_categories: tuple[CategoryStat, ...]

    @property
    def total(self) -> int:
        return sum(category.value for category in self.all_categories)

    @property
    def is_empty(self) -> bool:
        return not self.all_categories


EMPTY_TABULATION = Tabulation(chart_data=(), all_categories=())


def present_values(values: pd.Series) -> pd.Series:
    """Keep only non-empty string cells; missing cells from short rows drop out."""
    mask = values.map(lambda value: isinstance(value, str) and value != "")
    return values[mask.astype(bool)]


def rank_categories(values: pd.Series) -> pd.DataFrame:
    """Count distinct values and order them by descending count.

    Ties keep first-seen row order. Tabulation and sampling both rank through
    this function so they always agree on the top categories.
    """
    present = present_values(values)
    if present.empty:
        return pd.DataFrame(columns=RANKED_COLUMNS)

    observations = pd.DataFrame(
        {"category": present.to_numpy(), "row": present.index.to_numpy()}
    )
    ranked = (
        observations.groupby("category", sort=False)
        .agg(n=("row", "count"), first_seen_row=("row", "min"))
        .reset_index()
        .sort_values(["n", "first_seen_row"], ascending=[False, True], kind="mergesort")
        .reset_index(drop=True)
    )
    ranked["n"] = ranked["n"].astype(int)
    ranked["rank"] = range(1, len(ranked) + 1)
    return ranked[RANKED_COLUMNS].copy()


def format_percentage(count: float, total: float) -> str:
    return f"{100.0 * count / total:.2f}"


def category_frequency_table(dataset: Dataset, column_index: int) -> pd.DataFrame:
    ranked = rank_categories(dataset.column_values(column_index))
    total = int(ranked["n"].sum()) if not ranked.empty else 0
    ranked["percentage"] = [format_percentage(n, total) for n in ranked["n"]]
    return ranked


def tabulate(
    dataset: Dataset | None,
    column_index: int | None,
    *,
    top_n: int = DEFAULT_TOP_N,
    others_label: str = OTHERS_LABEL,
) -> Tabulation:
    """Split a column's value counts into the top ``top_n`` plus one "Others" bucket.

    The "Others" entry sums the already-formatted percentages of every category
    ranked below ``top_n``; it is omitted when there are ``top_n`` or fewer
    categories.
    """
    if dataset is None or column_index is None or dataset.n_rows == 0:
        return EMPTY_TABULATION

    ranked = category_frequency_table(dataset, column_index)
    if ranked.empty:
        return EMPTY_TABULATION

    all_categories = tuple(
        CategoryStat(name=str(row.category), value=int(row.n), percentage=str(row.percentage))
        for row in ranked.itertuples(index=False)
    )
    chart_data = [
        ChartDataItem(name=category.name, value=category.value, percentage=category.percentage)
        for category in all_categories[:top_n]
    ]
    rest = all_categories[top_n:]
    if rest:
        others_total = sum(float(category.percentage) for category in rest)
        chart_data.append(
            ChartDataItem(
                name=others_label,
                value=round(others_total, 2),
                percentage=f"{others_total:.2f}",
                is_other=True,
            )
        )

    LOGGER.debug(
        "Tabulated column %d: %d categories, %d chart entries",
        column_index,
        len(all_categories),
        len(chart_data),
    )
    return Tabulation(chart_data=tuple(chart_data), all_categories=all_categories)
