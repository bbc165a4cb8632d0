"""Bloom record loader.

Expected CSV columns::

    location,lat,long,alt,year,bloom_date,bloom_doy
    kyoto,35.012,135.6761,44,1812,1812-04-12,103
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pandas as pd

from cherry_bloom.datasources._validate import require_columns, validate_rows
from cherry_bloom.schemas import BloomRecord

if TYPE_CHECKING:
    from pathlib import Path

BLOOM_COLUMNS = ["location", "lat", "long", "alt", "year", "bloom_date", "bloom_doy"]


def bloom_records_from_frame(frame: pd.DataFrame) -> pd.DataFrame:
    """Validate a raw bloom table and return it with normalized dtypes.

    Raises:
        MalformedRecordError: If a column is missing or a row is invalid
            (including ``bloom_doy`` disagreeing with ``bloom_date``).
    """
    require_columns(frame, BLOOM_COLUMNS, "bloom")
    if pd.api.types.is_datetime64_any_dtype(frame["bloom_date"]):
        frame = frame.assign(bloom_date=frame["bloom_date"].dt.date)
    records = validate_rows(frame, BLOOM_COLUMNS, BloomRecord)

    table = pd.DataFrame([r.model_dump() for r in records], columns=BLOOM_COLUMNS)
    table["bloom_date"] = pd.to_datetime(table["bloom_date"])
    return table.astype({"year": "int64", "bloom_doy": "int64", "alt": "float64"})


def load_bloom_records(path: Path) -> pd.DataFrame:
    """Read and validate a bloom record CSV."""
    return bloom_records_from_frame(pd.read_csv(path))
