"""Column layouts for the derived winter tables and the winter-window constants."""

from __future__ import annotations

# Winter window: October through February, indexed 1-5 in chronological order
WINTER_MONTH_INDEX: dict[int, int] = {10: 1, 11: 2, 12: 3, 1: 4, 2: 5}

# Months whose winter belongs to the following calendar year's spring
AUTUMN_MONTHS = frozenset({10, 11, 12})

GROUP_KEY = ["location", "bloom_year"]

WEATHER_COLUMNS = ["location", "timestamp", "temp_min", "temp_max", "pressure", "humidity"]

WINDOW_COLUMNS = [
    *WEATHER_COLUMNS,
    "date",
    "month",
    "calendar_year",
    "bloom_year",
    "winter_month_index",
]

DAILY_COLUMNS = [
    "location",
    "date",
    "month",
    "calendar_year",
    "bloom_year",
    "winter_month_index",
    "min_temp",
    "max_temp",
    "min_humidity",
    "max_humidity",
    "min_pressure",
    "max_pressure",
]

CHILL_COLUMNS = ["location", "bloom_year", "chill_satisfied", "chill_date", "days_scanned"]

WINTER_FEATURE_COLUMNS = [
    "location",
    "bloom_year",
    "mean_min_temp",
    "var_min_temp",
    "n_days",
    "chill_satisfied",
    "chill_date",
]
