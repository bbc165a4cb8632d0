"""Daily Aggregator.

Collapses several same-day readings for a site into one row per
(location, date).
"""

from __future__ import annotations

import logging

import pandas as pd

from cherry_bloom.features.models import DAILY_COLUMNS

logger = logging.getLogger(__name__)


def aggregate_daily(windowed: pd.DataFrame) -> pd.DataFrame:
    """Reduce window-tagged readings to one summary row per site and day.

    Temperatures take the most extreme reading of the day (lowest minimum,
    highest maximum); humidity and pressure keep both their min and max.
    The window columns are constant within a day and are carried through.

    Args:
        windowed: Output of ``build_winter_window``.

    Returns:
        DailyWeatherSummary table ordered by (location, date).
    """
    if windowed.empty:
        return pd.DataFrame(columns=DAILY_COLUMNS)

    daily = (
        windowed.groupby(["location", "date"], sort=True)
        .agg(
            month=("month", "first"),
            calendar_year=("calendar_year", "first"),
            bloom_year=("bloom_year", "first"),
            winter_month_index=("winter_month_index", "first"),
            min_temp=("temp_min", "min"),
            max_temp=("temp_max", "max"),
            min_humidity=("humidity", "min"),
            max_humidity=("humidity", "max"),
            min_pressure=("pressure", "min"),
            max_pressure=("pressure", "max"),
        )
        .reset_index()
    )

    logger.debug("Aggregated %d readings into %d site-days", len(windowed), len(daily))
    return daily[DAILY_COLUMNS]
