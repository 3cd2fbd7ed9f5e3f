from __future__ import annotations

import logging
from typing import Callable, Protocol, Sequence

import pyperclip
import typer

from csv_tally.config import DEFAULT_CASE_NUMBER_COLUMN, DEFAULT_DISTRIBUTION
from csv_tally.errors import CsvTallyError
from csv_tally.features.sampling import SampleResult, build_export
from csv_tally.io.read import Dataset

LOGGER = logging.getLogger(__name__)

GENERIC_CLIPBOARD_ERROR = "Failed to copy to clipboard. Please try again."

ClipboardWriter = Callable[[str], None]


class Notifier(Protocol):
    def success(self, title: str, message: str) -> None: ...

    def error(self, title: str, message: str) -> None: ...


class ConsoleNotifier:
    """Prints notifications to the terminal; errors go to stderr."""

    def success(self, title: str, message: str) -> None:
        LOGGER.info("%s: %s", title, message)
        typer.secho(f"{title}: {message}", fg=typer.colors.GREEN)

    def error(self, title: str, message: str) -> None:
        LOGGER.warning("%s: %s", title, message)
        typer.secho(f"{title}: {message}", fg=typer.colors.RED, err=True)


def copied_message(entries: int) -> str:
    return f"{entries} entries copied to clipboard. Ready to paste in spreadsheet."


def copy_to_clipboard(
    text: str,
    notifier: Notifier,
    *,
    entries: int,
    writer: ClipboardWriter | None = None,
) -> bool:
    """Write ``text`` to the clipboard and report the outcome through ``notifier``."""
    writer = writer or pyperclip.copy
    try:
        writer(text)
    except Exception as exc:  # clipboard backends raise assorted platform errors
        LOGGER.debug("Clipboard write failed", exc_info=True)
        notifier.error("Error", str(exc) or GENERIC_CLIPBOARD_ERROR)
        return False
    notifier.success("Success", copied_message(entries))
    return True


def export_sample(
    dataset: Dataset | None,
    column: str | None,
    copy_count: int,
    include_case_number: bool,
    notifier: Notifier,
    *,
    case_number_column: str = DEFAULT_CASE_NUMBER_COLUMN,
    seed: int | None = None,
    distribution: Sequence[int] = DEFAULT_DISTRIBUTION,
) -> SampleResult | None:
    """Build the sample, turning input problems into error notifications."""
    try:
        return build_export(
            dataset,
            column,
            copy_count,
            include_case_number,
            case_number_column=case_number_column,
            seed=seed,
            distribution=distribution,
        )
    except CsvTallyError as exc:
        notifier.error("Error", str(exc))
        return None
