"""Tests for the winter window builder."""

from __future__ import annotations

from datetime import date, datetime

import pandas as pd
import pytest

from cherry_bloom.features.models import WINDOW_COLUMNS, WINTER_MONTH_INDEX
from cherry_bloom.features.window import bloom_year_for, build_winter_window


def _weather(*timestamps: datetime) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "location": ["kyoto"] * len(timestamps),
            "timestamp": pd.to_datetime(list(timestamps)),
            "temp_min": [30.0] * len(timestamps),
            "temp_max": [45.0] * len(timestamps),
            "pressure": [1012.0] * len(timestamps),
            "humidity": [70.0] * len(timestamps),
        }
    )


class TestBloomYearFor:
    """Tests for the scalar bloom-year helper."""

    @pytest.mark.parametrize(
        ("day", "expected"),
        [
            (date(1999, 12, 31), 2000),
            (date(2000, 1, 1), 2000),
            (date(1999, 10, 1), 2000),
            (date(2000, 2, 29), 2000),
            (date(2000, 6, 15), None),
            (date(2000, 3, 1), None),
            (date(2000, 9, 30), None),
        ],
    )
    def test_bloom_year(self, day: date, expected: int | None) -> None:
        """Oct-Dec roll forward a year, Jan-Feb stay, Mar-Sep are outside."""
        assert bloom_year_for(day) == expected


class TestBuildWinterWindow:
    """Tests for tagging weather readings with their winter."""

    def test_year_boundary(self) -> None:
        """Dec 31 and Jan 1 land in the same bloom year; June is dropped."""
        weather = _weather(
            datetime(1999, 12, 31, 12),
            datetime(2000, 1, 1, 0),
            datetime(2000, 6, 15, 9),
        )
        windowed = build_winter_window(weather)

        assert len(windowed) == 2
        assert windowed["bloom_year"].tolist() == [2000, 2000]
        assert windowed["calendar_year"].tolist() == [1999, 2000]
        assert windowed["winter_month_index"].tolist() == [3, 4]

    def test_month_index_mapping(self) -> None:
        """Each winter month gets its fixed position in the window."""
        weather = _weather(*(datetime(2000 if m <= 2 else 1999, m, 15) for m in (10, 11, 12, 1, 2)))
        windowed = build_winter_window(weather)

        assert windowed["month"].tolist() == [10, 11, 12, 1, 2]
        assert windowed["winter_month_index"].tolist() == [1, 2, 3, 4, 5]
        assert windowed["winter_month_index"].tolist() == [
            WINTER_MONTH_INDEX[m] for m in windowed["month"]
        ]
        assert set(windowed["bloom_year"]) == {2000}

    def test_date_truncates_time_of_day(self) -> None:
        """Sub-daily timestamps collapse to their calendar date."""
        weather = _weather(datetime(2001, 1, 5, 6), datetime(2001, 1, 5, 18))
        windowed = build_winter_window(weather)

        assert windowed["date"].tolist() == [pd.Timestamp("2001-01-05")] * 2

    def test_all_summer_rows_dropped(self) -> None:
        """A table with no Oct-Feb readings produces an empty window."""
        weather = _weather(datetime(2000, 4, 1), datetime(2000, 8, 1))
        windowed = build_winter_window(weather)

        assert windowed.empty
        assert list(windowed.columns) == WINDOW_COLUMNS

    def test_input_not_modified(self) -> None:
        """The caller's table is left untouched."""
        weather = _weather(datetime(1999, 11, 2), datetime(2000, 5, 2))
        before = weather.copy()
        build_winter_window(weather)
        pd.testing.assert_frame_equal(weather, before)
