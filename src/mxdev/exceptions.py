"""Errors raised by the analysis pipeline."""

from __future__ import annotations


class AnalysisError(ValueError):
    """Base class for every failure the pipeline surfaces to the analyst."""


class SchemaError(AnalysisError):
    """An expected column is missing or has the wrong type."""

    def __init__(self, column: str, message: str | None = None) -> None:
        self.column = column
        super().__init__(message or f"Missing required column: '{column}'")


class DataQualityError(AnalysisError):
    """A required field holds a missing, non-finite or duplicated value."""

    def __init__(self, message: str, *, row: int | None = None, column: str | None = None) -> None:
        self.row = row
        self.column = column
        super().__init__(message)


class DegenerateInputError(AnalysisError):
    """Input that cannot produce a meaningful PCA or clustering."""
