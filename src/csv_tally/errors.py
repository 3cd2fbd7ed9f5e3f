from __future__ import annotations


class CsvTallyError(ValueError):
    """Base class for recoverable input problems reported back to the user."""


class DatasetNotLoadedError(CsvTallyError):
    def __init__(self, message: str = "Please upload a CSV file and select a header first.") -> None:
        super().__init__(message)


class ColumnNotSelectedError(CsvTallyError):
    def __init__(self, message: str = "Please upload a CSV file and select a header first.") -> None:
        super().__init__(message)


class ColumnNotFoundError(CsvTallyError):
    def __init__(self, column: str) -> None:
        self.column = column
        super().__init__(f"Selected header not found in the CSV: {column!r}")


class CaseNumberColumnMissingError(CsvTallyError):
    def __init__(self, column: str) -> None:
        self.column = column
        super().__init__(f"Case Number column not found in the CSV: {column!r}")


class InvalidCopyCountError(CsvTallyError):
    def __init__(self, copy_count: int) -> None:
        self.copy_count = copy_count
        super().__init__(f"Copy count must be at least 1, got {copy_count}")
