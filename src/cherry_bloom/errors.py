"""Exception hierarchy for the bloom pipeline.

Every failure the pipeline raises on purpose derives from ``CherryBloomError``
so callers (the CLI, the Prefect flow) can catch one type and abort the run.
"""

from __future__ import annotations


class CherryBloomError(Exception):
    """Base class for all pipeline errors."""


class MalformedRecordError(CherryBloomError):
    """An input row is missing a required field or fails validation."""

    def __init__(self, message: str, row: int | None = None) -> None:
        self.row = row
        if row is not None:
            message = f"row {row}: {message}"
        super().__init__(message)


class InsufficientDataError(CherryBloomError):
    """The model cannot be fit with the rows it was given."""


class RankDeficientModelError(InsufficientDataError):
    """The design matrix is not full column rank.

    ``predictor`` names the first term that adds no information beyond the
    terms before it (or ``"location"`` when only one site is left).
    """

    def __init__(self, predictor: str, message: str | None = None) -> None:
        self.predictor = predictor
        super().__init__(message or f"design matrix is rank-deficient at predictor {predictor!r}")
