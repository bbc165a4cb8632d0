"""Winter chill feature engineering.

Stages, in order:
  - window:    raw readings -> bloom_year + winter_month_index (Oct-Feb only)
  - daily:     several readings per site-day -> one DailyWeatherSummary row
  - streak:    per-winter scan for a run of cold days (chill requirement)
  - aggregate: per-winter mean/variance of daily minimums + chill flag

Public API:
  - models: WINTER_MONTH_INDEX and the table column layouts
  - serialization: winter_features_to_records
"""

from cherry_bloom.features.aggregate import compute_winter_features
from cherry_bloom.features.daily import aggregate_daily
from cherry_bloom.features.models import (
    CHILL_COLUMNS,
    DAILY_COLUMNS,
    WINTER_FEATURE_COLUMNS,
    WINTER_MONTH_INDEX,
)
from cherry_bloom.features.serialization import winter_features_to_records
from cherry_bloom.features.streak import ChillStreak, detect_chill_streaks, scan_winter
from cherry_bloom.features.window import bloom_year_for, build_winter_window

__all__ = [
    "CHILL_COLUMNS",
    "DAILY_COLUMNS",
    "WINTER_FEATURE_COLUMNS",
    "WINTER_MONTH_INDEX",
    "ChillStreak",
    "aggregate_daily",
    "bloom_year_for",
    "build_winter_window",
    "compute_winter_features",
    "detect_chill_streaks",
    "scan_winter",
    "winter_features_to_records",
]
