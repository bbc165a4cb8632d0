"""Weather observation loader.

Expected CSV columns (``pressure`` and ``humidity`` may be blank)::

    location,timestamp,temp_min,temp_max,pressure,humidity
    washingtondc,1999-12-31T06:00:00,28.4,39.2,1021.0,71

Timestamps are read as local wall-clock time at the site. A UTC offset, if
present, is dropped without shifting the clock, so the calendar date of a
reading is always its local date (a file may switch offsets at a DST change).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pandas as pd

from cherry_bloom.datasources._validate import require_columns, validate_rows
from cherry_bloom.features.models import WEATHER_COLUMNS
from cherry_bloom.schemas import WeatherObservation

if TYPE_CHECKING:
    from pathlib import Path

REQUIRED_WEATHER_COLUMNS = ["location", "timestamp", "temp_min", "temp_max"]


def weather_from_frame(frame: pd.DataFrame) -> pd.DataFrame:
    """Validate a raw weather table and return it with normalized dtypes.

    Missing ``pressure`` / ``humidity`` columns are added as all-NaN.

    Raises:
        MalformedRecordError: If a required column is missing or a row is invalid.
    """
    require_columns(frame, REQUIRED_WEATHER_COLUMNS, "weather")
    frame = frame.reindex(columns=WEATHER_COLUMNS)
    records = validate_rows(frame, WEATHER_COLUMNS, WeatherObservation)

    rows = [r.model_dump() for r in records]
    for row in rows:
        row["timestamp"] = row["timestamp"].replace(tzinfo=None)
    table = pd.DataFrame(rows, columns=WEATHER_COLUMNS)
    table["timestamp"] = pd.to_datetime(table["timestamp"])
    return table.astype(
        {"temp_min": "float64", "temp_max": "float64", "pressure": "float64", "humidity": "float64"}
    )


def load_weather_observations(path: Path) -> pd.DataFrame:
    """Read and validate a weather observation CSV."""
    return weather_from_frame(pd.read_csv(path))
