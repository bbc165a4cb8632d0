"""Winter Window Builder.

Tags each weather reading with the bloom year its winter feeds into and its
position inside the October-February window. Readings from March through
September are dropped.

    Oct 1999 .. Dec 1999  ->  bloom_year 2000, winter_month_index 1..3
    Jan 2000 .. Feb 2000  ->  bloom_year 2000, winter_month_index 4..5
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pandas as pd

from cherry_bloom.features.models import AUTUMN_MONTHS, WINDOW_COLUMNS, WINTER_MONTH_INDEX

if TYPE_CHECKING:
    from datetime import date

logger = logging.getLogger(__name__)


def bloom_year_for(day: date) -> int | None:
    """Return the bloom year a calendar date belongs to, or None outside the window.

    Args:
        day: Calendar date of the reading.

    Returns:
        ``day.year + 1`` for Oct-Dec, ``day.year`` for Jan-Feb, None otherwise.
    """
    if day.month not in WINTER_MONTH_INDEX:
        return None
    return day.year + 1 if day.month in AUTUMN_MONTHS else day.year


def build_winter_window(weather: pd.DataFrame) -> pd.DataFrame:
    """Assign bloom year and winter month index to raw weather readings.

    Args:
        weather: Weather observations with a ``timestamp`` column. Sub-daily
            timestamps are fine; the calendar date is taken from each one.

    Returns:
        New DataFrame restricted to Oct-Feb readings, with ``date``,
        ``month``, ``calendar_year``, ``bloom_year`` and ``winter_month_index``
        columns added. Input row order is kept.
    """
    timestamps = pd.to_datetime(weather["timestamp"])
    months = timestamps.dt.month
    in_window = months.isin(list(WINTER_MONTH_INDEX))

    windowed = weather.loc[in_window].copy()
    timestamps = timestamps[in_window]
    months = months[in_window]

    windowed["date"] = timestamps.dt.normalize()
    windowed["month"] = months.astype("int64")
    windowed["calendar_year"] = timestamps.dt.year.astype("int64")
    windowed["bloom_year"] = windowed["calendar_year"] + months.isin(list(AUTUMN_MONTHS)).astype(
        "int64"
    )
    windowed["winter_month_index"] = months.map(WINTER_MONTH_INDEX).astype("int64")

    dropped = len(weather) - len(windowed)
    if dropped:
        logger.debug("Dropped %d readings outside the Oct-Feb window", dropped)

    return windowed.reset_index(drop=True)[WINDOW_COLUMNS]
