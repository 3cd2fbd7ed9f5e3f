from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from csv_tally.config import DEFAULT_CASE_NUMBER_COLUMN, DEFAULT_DISTRIBUTION
from csv_tally.errors import (
    CaseNumberColumnMissingError,
    ColumnNotSelectedError,
    DatasetNotLoadedError,
    InvalidCopyCountError,
)
from csv_tally.features.categories import present_values, rank_categories
from csv_tally.io.read import Dataset

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class CategoryCases:
    name: str
    count: int
    case_ids: tuple[str, ...]


@dataclass(frozen=True)
class SampleResult:
    text: str
    lines: tuple[str, ...]
    requested: int
    allocation: tuple[int, ...]

    @property
    def emitted(self) -> int:
        return len(self.lines)


def collect_category_cases(
    dataset: Dataset,
    column_index: int,
    case_number_index: int | None = None,
) -> list[CategoryCases]:
    """Ranked categories of a column with the case ids seen for each, in row order."""
    values = dataset.column_values(column_index)
    ranked = rank_categories(values)
    cases: dict[str, list[str]] = {str(name): [] for name in ranked["category"]}

    if case_number_index is not None:
        present = present_values(values)
        case_cells = dataset.column_values(case_number_index).reindex(present.index)
        for value, case_id in zip(present, case_cells):
            if isinstance(case_id, str) and case_id:
                cases[value].append(case_id)

    return [
        CategoryCases(name=str(row.category), count=int(row.n), case_ids=tuple(cases[row.category]))
        for row in ranked.itertuples(index=False)
    ]


def allocate_units(
    n_categories: int,
    copy_count: int,
    *,
    distribution: Sequence[int] = DEFAULT_DISTRIBUTION,
    rng: np.random.Generator | None = None,
) -> list[int]:
    """Assign output units to each ranked category.

    The leading ranks get the fixed ``distribution`` (cut short once
    ``copy_count`` is used up). Whatever ``copy_count`` leaves beyond the full
    distribution is spent one unit each on a uniformly random subset of the
    remaining categories.
    """
    if copy_count < 1:
        raise InvalidCopyCountError(copy_count)

    units = [0] * n_categories
    budget = copy_count
    for rank, fixed_units in enumerate(distribution[:n_categories]):
        if budget <= 0:
            break
        units[rank] = min(fixed_units, budget)
        budget -= units[rank]

    fixed_ranks = len(distribution)
    remaining = copy_count - sum(distribution)
    tail = n_categories - fixed_ranks
    if remaining > 0 and tail > 0:
        rng = rng if rng is not None else np.random.default_rng()
        picks = rng.choice(tail, size=min(remaining, tail), replace=False)
        for offset in picks:
            units[fixed_ranks + int(offset)] = 1
    return units


def emit_lines(
    categories: Sequence[CategoryCases],
    units: Sequence[int],
    include_case_number: bool,
) -> list[str]:
    lines: list[str] = []
    for category, allotted in zip(categories, units):
        if allotted <= 0:
            continue
        if include_case_number:
            lines.extend(f"{category.name}\t{case_id}" for case_id in category.case_ids[:allotted])
        else:
            lines.extend([category.name] * min(allotted, category.count))
    return lines


def sample(
    dataset: Dataset | None,
    column_index: int | None,
    case_number_index: int | None,
    copy_count: int,
    include_case_number: bool,
    *,
    case_number_column: str = DEFAULT_CASE_NUMBER_COLUMN,
    seed: int | None = None,
    distribution: Sequence[int] = DEFAULT_DISTRIBUTION,
) -> SampleResult:
    """Build the spreadsheet-ready sample text for one column."""
    if dataset is None:
        raise DatasetNotLoadedError()
    if column_index is None:
        raise ColumnNotSelectedError()
    if include_case_number and case_number_index is None:
        raise CaseNumberColumnMissingError(case_number_column)
    if copy_count < 1:
        raise InvalidCopyCountError(copy_count)

    categories = collect_category_cases(
        dataset,
        column_index,
        case_number_index if include_case_number else None,
    )
    units = allocate_units(
        len(categories),
        copy_count,
        distribution=distribution,
        rng=np.random.default_rng(seed),
    )
    lines = emit_lines(categories, units, include_case_number)
    text = "\n".join(lines).rstrip()

    LOGGER.info(
        "Sampled %d of %d requested lines across %d categories",
        len(lines),
        copy_count,
        sum(1 for allotted in units if allotted > 0),
    )
    return SampleResult(
        text=text,
        lines=tuple(lines),
        requested=copy_count,
        allocation=tuple(units),
    )


def build_export(
    dataset: Dataset | None,
    column: str | None,
    copy_count: int,
    include_case_number: bool,
    *,
    case_number_column: str = DEFAULT_CASE_NUMBER_COLUMN,
    seed: int | None = None,
    distribution: Sequence[int] = DEFAULT_DISTRIBUTION,
) -> SampleResult:
    """Resolve column names against the header, then sample."""
    if dataset is None:
        raise DatasetNotLoadedError()
    if not column:
        raise ColumnNotSelectedError()

    column_index = dataset.column_index(column)
    case_number_index = dataset.find_column(case_number_column)
    if include_case_number and case_number_index is None:
        raise CaseNumberColumnMissingError(case_number_column)

    return sample(
        dataset,
        column_index,
        case_number_index,
        copy_count,
        include_case_number,
        case_number_column=case_number_column,
        seed=seed,
        distribution=distribution,
    )
