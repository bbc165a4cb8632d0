"""Input tables for the pipeline.

Each loader reads one CSV, validates every row against its pydantic schema
(``cherry_bloom.schemas``) and returns a DataFrame with fixed columns.
A bad row raises ``MalformedRecordError``; nothing is skipped silently.

Public API:
  - bloom:   load_bloom_records, bloom_records_from_frame
  - weather: load_weather_observations, weather_from_frame
"""

from cherry_bloom.datasources.bloom import (
    BLOOM_COLUMNS,
    bloom_records_from_frame,
    load_bloom_records,
)
from cherry_bloom.datasources.weather import load_weather_observations, weather_from_frame

__all__ = [
    "BLOOM_COLUMNS",
    "bloom_records_from_frame",
    "load_bloom_records",
    "load_weather_observations",
    "weather_from_frame",
]
