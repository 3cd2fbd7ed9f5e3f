from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass
from pathlib import Path

import pandas as pd

from csv_tally.config import InputConfig
from csv_tally.errors import ColumnNotFoundError, CsvTallyError

LOGGER = logging.getLogger(__name__)

UNNAMED_COLUMN_LABEL = "Unnamed Column"


@dataclass(frozen=True, eq=False)
class Dataset:
    """Header plus data rows of one CSV file.

    ``frame`` uses positional integer columns so duplicate or empty header
    names stay addressable. Cells are strings; cells absent from short rows
    are null.
    """

    source: str
    header: list[str]
    frame: pd.DataFrame

    @property
    def n_rows(self) -> int:
        return int(len(self.frame))

    def find_column(self, name: str) -> int | None:
        # First match wins when header names repeat.
        for index, header_name in enumerate(self.header):
            if header_name == name:
                return index
        return None

    def column_index(self, name: str) -> int:
        index = self.find_column(name)
        if index is None:
            raise ColumnNotFoundError(name)
        return index

    def column_values(self, index: int) -> pd.Series:
        if index not in self.frame.columns:
            return pd.Series([pd.NA] * len(self.frame), index=self.frame.index, dtype=object)
        return self.frame[index]

    def display_columns(self) -> list[str]:
        return [name or UNNAMED_COLUMN_LABEL for name in self.header]


def _read_header(csv_path: Path, config: InputConfig) -> list[str]:
    head = pd.read_csv(
        csv_path,
        header=None,
        nrows=1,
        dtype=object,
        keep_default_na=False,
        sep=config.delimiter,
        encoding=config.encoding,
        engine="python",
    )
    return [str(value) for value in head.iloc[0].tolist()]


def load_dataset(csv_path: Path, config: InputConfig | None = None) -> Dataset:
    """Parse a CSV file into a Dataset; the first row is treated as the header."""
    config = config or InputConfig()
    try:
        header = _read_header(csv_path, config)
    except pd.errors.EmptyDataError as exc:
        raise CsvTallyError(f"CSV file is empty: {csv_path}") from exc
    except (pd.errors.ParserError, UnicodeDecodeError) as exc:
        raise CsvTallyError(f"Could not parse CSV file {csv_path}: {exc}") from exc

    width = len(header)
    try:
        # Cells beyond the header width can never be selected, so long rows are cut.
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", category=pd.errors.ParserWarning)
            table = pd.read_csv(
                csv_path,
                header=None,
                names=list(range(width)),
                index_col=False,
                dtype=object,
                keep_default_na=False,
                sep=config.delimiter,
                encoding=config.encoding,
                engine="python",
                on_bad_lines=lambda bad_line: bad_line[:width],
            )
    except (pd.errors.ParserError, UnicodeDecodeError) as exc:
        raise CsvTallyError(f"Could not parse CSV file {csv_path}: {exc}") from exc

    frame = table.iloc[1:].reset_index(drop=True)
    LOGGER.info("Loaded %s: %d columns, %d data rows", csv_path, width, len(frame))
    return Dataset(source=str(csv_path), header=header, frame=frame)
