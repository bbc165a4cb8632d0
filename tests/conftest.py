"""Shared fixtures: small hand-built tables and a synthetic multi-site dataset."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import date, datetime, timedelta

import numpy as np
import pandas as pd
import pytest

from cherry_bloom.datasources.bloom import BLOOM_COLUMNS
from cherry_bloom.features.models import WEATHER_COLUMNS

WeatherFactory = Callable[..., pd.DataFrame]
BloomFactory = Callable[..., pd.DataFrame]


def _weather_rows(
    location: str,
    start: date,
    min_temps: Sequence[float],
    readings_per_day: int = 1,
) -> list[dict[str, object]]:
    rows: list[dict[str, object]] = []
    for offset, tmin in enumerate(min_temps):
        day = start + timedelta(days=offset)
        for hour in range(readings_per_day):
            rows.append(
                {
                    "location": location,
                    "timestamp": datetime(day.year, day.month, day.day, 6 * hour),
                    # later readings of the day are warmer
                    "temp_min": tmin + 2.0 * hour,
                    "temp_max": tmin + 15.0 + hour,
                    "pressure": 1010.0 + hour,
                    "humidity": 60.0 + 5 * hour,
                }
            )
    return rows


@pytest.fixture
def make_weather() -> WeatherFactory:
    """Build a weather table of consecutive days from a list of minimum temps."""

    def factory(
        location: str,
        start: date,
        min_temps: Sequence[float],
        readings_per_day: int = 1,
    ) -> pd.DataFrame:
        rows = _weather_rows(location, start, min_temps, readings_per_day)
        frame = pd.DataFrame(rows, columns=WEATHER_COLUMNS)
        frame["timestamp"] = pd.to_datetime(frame["timestamp"])
        return frame

    return factory


@pytest.fixture
def make_bloom() -> BloomFactory:
    """Build a bloom table from (location, year, bloom_doy) triples."""

    def factory(rows: Sequence[tuple[str, int, int]], alt: float = 10.0) -> pd.DataFrame:
        records = []
        for location, year, doy in rows:
            bloom_date = date(year, 1, 1) + timedelta(days=doy - 1)
            records.append(
                {
                    "location": location,
                    "lat": 35.0,
                    "long": 135.0,
                    "alt": alt,
                    "year": year,
                    "bloom_date": pd.Timestamp(bloom_date),
                    "bloom_doy": doy,
                }
            )
        return pd.DataFrame(records, columns=BLOOM_COLUMNS)

    return factory


# Per-site (baseline winter mean in F, bloom offset in days)
SYNTHETIC_SITES = {
    "kyoto": (38.0, 0.0),
    "liestal": (33.0, 6.0),
    "washingtondc": (36.0, -3.0),
}
SYNTHETIC_SLOPE = 2.0


def synthetic_tables(
    years: range = range(1981, 2021),
    seed: int = 7,
) -> tuple[pd.DataFrame, pd.DataFrame]:
    """Three sites x 40 winters where bloom DOY rises linearly with winter warmth.

    bloom_doy = 95 + site_offset + 2.0 * (winter_mean - 35) + N(0, 2)
    """
    rng = np.random.default_rng(seed)
    weather_rows: list[dict[str, object]] = []
    bloom_rows: list[dict[str, object]] = []

    for location, (baseline, offset) in SYNTHETIC_SITES.items():
        for year in years:
            winter_mean = baseline + rng.normal(0.0, 3.0)
            start = date(year - 1, 10, 1)
            n_days = (date(year, 3, 1) - start).days
            mins = winter_mean + rng.normal(0.0, 4.0, size=n_days)
            weather_rows.extend(_weather_rows(location, start, [float(m) for m in mins]))

            doy = round(95 + offset + SYNTHETIC_SLOPE * (winter_mean - 35) + rng.normal(0.0, 2.0))
            bloom_date = date(year, 1, 1) + timedelta(days=doy - 1)
            bloom_rows.append(
                {
                    "location": location,
                    "lat": 35.0,
                    "long": 135.0,
                    "alt": 40.0,
                    "year": year,
                    "bloom_date": pd.Timestamp(bloom_date),
                    "bloom_doy": doy,
                }
            )

    weather = pd.DataFrame(weather_rows, columns=WEATHER_COLUMNS)
    weather["timestamp"] = pd.to_datetime(weather["timestamp"])
    bloom = pd.DataFrame(bloom_rows, columns=BLOOM_COLUMNS)
    return bloom, weather


@pytest.fixture(scope="session")
def synthetic() -> tuple[pd.DataFrame, pd.DataFrame]:
    """(bloom, weather) tables for the three-site synthetic dataset."""
    return synthetic_tables()
