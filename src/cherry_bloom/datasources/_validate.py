"""Row validation shared by the CSV loaders."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, TypeVar

import pandas as pd
from pydantic import BaseModel, ValidationError

from cherry_bloom.errors import MalformedRecordError

if TYPE_CHECKING:
    from collections.abc import Sequence

ModelT = TypeVar("ModelT", bound=BaseModel)


def require_columns(frame: pd.DataFrame, columns: Sequence[str], table: str) -> None:
    """Raise MalformedRecordError if ``frame`` lacks any of ``columns``."""
    missing = [c for c in columns if c not in frame.columns]
    if missing:
        msg = f"{table} table is missing required columns: {', '.join(missing)}"
        raise MalformedRecordError(msg)


def _clean_value(value: Any) -> Any:
    """Map pandas missing markers to None and Timestamps to datetimes."""
    if isinstance(value, pd.Timestamp):
        return None if pd.isna(value) else value.to_pydatetime()
    if value is None or (not isinstance(value, str | datetime) and pd.isna(value)):
        return None
    return value


def validate_rows(
    frame: pd.DataFrame,
    columns: Sequence[str],
    model: type[ModelT],
) -> list[ModelT]:
    """Validate every row of ``frame[columns]`` against a pydantic model.

    Raises:
        MalformedRecordError: On the first row that fails validation, with its
            zero-based position in ``frame``.
    """
    records: list[ModelT] = []
    for position, row in enumerate(frame[list(columns)].to_dict(orient="records")):
        cleaned = {key: _clean_value(value) for key, value in row.items()}
        try:
            records.append(model.model_validate(cleaned))
        except ValidationError as exc:
            errors = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'record'}: {err['msg']}"
                for err in exc.errors()
            )
            raise MalformedRecordError(errors, row=position) from exc
    return records
