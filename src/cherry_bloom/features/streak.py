"""Chill Streak Detector.

A winter satisfies the chill requirement once it has ``required_days``
consecutive days with a minimum temperature at or below ``threshold``.
Any warmer day (or a day with no minimum recorded) resets the run.

Each (location, bloom_year) winter gets its own ``ChillStreak`` state. The
scan walks days in calendar order and stops at the first day the run reaches
the required length; what happens later in that winter does not matter.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING

import pandas as pd

from cherry_bloom.features.models import CHILL_COLUMNS, GROUP_KEY
from cherry_bloom.schemas import DEFAULT_CHILL_STREAK_DAYS, DEFAULT_CHILL_THRESHOLD_F

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)


@dataclass
class ChillStreak:
    """Running scan state for a single winter."""

    threshold: float = DEFAULT_CHILL_THRESHOLD_F
    required_days: int = DEFAULT_CHILL_STREAK_DAYS
    streak: int = 0
    days_scanned: int = 0
    satisfied_on: date | None = None

    @property
    def satisfied(self) -> bool:
        """True once the streak has reached the required length."""
        return self.satisfied_on is not None

    def observe(self, day: date, min_temp: float) -> bool:
        """Feed the next day of the winter into the scan.

        Args:
            day: Calendar date of the reading.
            min_temp: Daily minimum temperature. NaN counts as a warm day.

        Returns:
            True when this day completes the streak.
        """
        self.days_scanned += 1
        if min_temp <= self.threshold:
            self.streak += 1
        else:
            self.streak = 0

        if self.streak >= self.required_days:
            self.satisfied_on = day
            return True
        return False


def scan_winter(
    days: Iterable[tuple[date, float]],
    threshold: float = DEFAULT_CHILL_THRESHOLD_F,
    required_days: int = DEFAULT_CHILL_STREAK_DAYS,
) -> ChillStreak:
    """Scan one winter's (date, min_temp) pairs, in calendar order.

    Stops consuming ``days`` as soon as the requirement is met.

    Returns:
        The final scan state for the winter.
    """
    state = ChillStreak(threshold=threshold, required_days=required_days)
    for day, min_temp in days:
        if state.observe(day, min_temp):
            break
    return state


def detect_chill_streaks(
    daily: pd.DataFrame,
    threshold: float = DEFAULT_CHILL_THRESHOLD_F,
    required_days: int = DEFAULT_CHILL_STREAK_DAYS,
) -> pd.DataFrame:
    """Flag every (location, bloom_year) winter that meets the chill requirement.

    Args:
        daily: DailyWeatherSummary table (one row per site and date).
        threshold: Chill threshold, in the same unit as ``min_temp``.
        required_days: Length of the run that satisfies the requirement.

    Returns:
        One row per winter with ``chill_satisfied``, ``chill_date`` (the day
        the run completed, NaT otherwise) and ``days_scanned``.

    Raises:
        ValueError: If a winter has more than one row for the same date.
    """
    locations: list[str] = []
    bloom_years: list[int] = []
    satisfied: list[bool] = []
    chill_dates: list[date | None] = []
    days_scanned: list[int] = []

    for (location, bloom_year), winter in daily.groupby(GROUP_KEY, sort=True):
        ordered = winter.sort_values("date", kind="mergesort")
        if ordered["date"].duplicated().any():
            msg = f"{location} {bloom_year}: duplicate dates, aggregate to daily rows first"
            raise ValueError(msg)

        days = zip(pd.to_datetime(ordered["date"]).dt.date, ordered["min_temp"], strict=True)
        state = scan_winter(days, threshold=threshold, required_days=required_days)

        locations.append(location)
        bloom_years.append(int(bloom_year))
        satisfied.append(state.satisfied)
        chill_dates.append(state.satisfied_on)
        days_scanned.append(state.days_scanned)

    chill = pd.DataFrame(
        {
            "location": pd.Series(locations, dtype="object"),
            "bloom_year": pd.Series(bloom_years, dtype="int64"),
            "chill_satisfied": pd.Series(satisfied, dtype="bool"),
            "chill_date": pd.to_datetime(pd.Series(chill_dates, dtype="object")),
            "days_scanned": pd.Series(days_scanned, dtype="int64"),
        }
    )
    logger.info(
        "Chill requirement met in %d of %d winters (threshold %.1f, %d days)",
        int(chill["chill_satisfied"].sum()),
        len(chill),
        threshold,
        required_days,
    )
    return chill[CHILL_COLUMNS]
