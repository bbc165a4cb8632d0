"""Tests for the bloom and weather CSV loaders."""

from __future__ import annotations

from datetime import date
from io import StringIO
from typing import TYPE_CHECKING

import pandas as pd
import pytest

from cherry_bloom.datasources import (
    bloom_records_from_frame,
    load_bloom_records,
    load_weather_observations,
    weather_from_frame,
)
from cherry_bloom.errors import MalformedRecordError

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

BLOOM_CSV = """\
location,lat,long,alt,year,bloom_date,bloom_doy
kyoto,35.012,135.6761,44,2021,2021-03-26,85
liestal,47.4814,7.730519,350,2020,2020-03-24,84
"""

WEATHER_CSV = """\
location,timestamp,temp_min,temp_max,pressure,humidity
kyoto,2020-12-01T06:00:00,30.2,45.1,1018.0,70
kyoto,2020-12-01T18:00:00,33.0,48.0,,
"""


class TestLoadBloomRecords:
    """Tests for bloom record loading and validation."""

    def test_loads_csv(self, tmp_path: Path) -> None:
        """Valid CSV loads with normalized dtypes."""
        path = tmp_path / "bloom.csv"
        path.write_text(BLOOM_CSV)

        bloom = load_bloom_records(path)

        assert list(bloom["location"]) == ["kyoto", "liestal"]
        assert bloom["year"].dtype == "int64"
        assert bloom["alt"].dtype == "float64"
        assert pd.api.types.is_datetime64_any_dtype(bloom["bloom_date"])
        assert bloom.loc[1, "bloom_date"].date() == date(2020, 3, 24)

    def test_accepts_timestamp_column(self, make_bloom: Callable[..., pd.DataFrame]) -> None:
        """Frames with datetime bloom dates validate too."""
        bloom = bloom_records_from_frame(make_bloom([("kyoto", 2001, 95)]))
        assert bloom.loc[0, "bloom_doy"] == 95

    def test_missing_column(self) -> None:
        frame = pd.read_csv(StringIO(BLOOM_CSV)).drop(columns="bloom_doy")
        with pytest.raises(MalformedRecordError, match="bloom_doy"):
            bloom_records_from_frame(frame)

    def test_doy_must_match_date(self, tmp_path: Path) -> None:
        """A day-of-year disagreeing with the date is rejected with its row."""
        path = tmp_path / "bloom.csv"
        path.write_text(BLOOM_CSV.replace("2020-03-24,84", "2020-03-24,83"))

        with pytest.raises(MalformedRecordError) as exc_info:
            load_bloom_records(path)
        assert exc_info.value.row == 1
        assert "row 1" in str(exc_info.value)

    def test_date_must_be_in_year(self, tmp_path: Path) -> None:
        path = tmp_path / "bloom.csv"
        path.write_text(BLOOM_CSV.replace(",44,2021,", ",44,2022,"))

        with pytest.raises(MalformedRecordError, match="row 0"):
            load_bloom_records(path)

    def test_missing_value(self, tmp_path: Path) -> None:
        """A blank required field is malformed."""
        path = tmp_path / "bloom.csv"
        path.write_text(BLOOM_CSV.replace("kyoto,35.012", ",35.012"))

        with pytest.raises(MalformedRecordError, match="location"):
            load_bloom_records(path)


class TestLoadWeatherObservations:
    """Tests for weather loading and validation."""

    def test_loads_csv(self, tmp_path: Path) -> None:
        """Sub-daily readings load; blank optional fields become NaN."""
        path = tmp_path / "weather.csv"
        path.write_text(WEATHER_CSV)

        weather = load_weather_observations(path)

        assert len(weather) == 2
        assert pd.api.types.is_datetime64_any_dtype(weather["timestamp"])
        assert weather.loc[0, "pressure"] == 1018.0
        assert pd.isna(weather.loc[1, "humidity"])

    def test_optional_columns_may_be_absent(self) -> None:
        """Pressure and humidity columns are added when absent."""
        frame = pd.DataFrame(
            {
                "location": ["kyoto"],
                "timestamp": ["2020-12-01T00:00:00"],
                "temp_min": [30.0],
                "temp_max": [40.0],
            }
        )
        weather = weather_from_frame(frame)
        assert weather["pressure"].isna().all()
        assert weather["humidity"].isna().all()

    def test_missing_required_column(self) -> None:
        frame = pd.DataFrame({"location": ["kyoto"], "timestamp": ["2020-12-01"], "temp_max": [40.0]})
        with pytest.raises(MalformedRecordError, match="temp_min"):
            weather_from_frame(frame)

    def test_bad_timestamp(self, tmp_path: Path) -> None:
        path = tmp_path / "weather.csv"
        path.write_text(WEATHER_CSV.replace("2020-12-01T18:00:00", "not-a-time"))

        with pytest.raises(MalformedRecordError, match="row 1: timestamp"):
            load_weather_observations(path)

    def test_missing_temperature(self, tmp_path: Path) -> None:
        """A blank minimum temperature is malformed."""
        path = tmp_path / "weather.csv"
        path.write_text(WEATHER_CSV.replace("30.2,", ","))

        with pytest.raises(MalformedRecordError, match="row 0: temp_min"):
            load_weather_observations(path)

    def test_mixed_utc_offsets_keep_local_time(self, tmp_path: Path) -> None:
        """Offsets changing at a DST switch load as local wall-clock times."""
        path = tmp_path / "weather.csv"
        path.write_text(
            "location,timestamp,temp_min,temp_max\n"
            "washingtondc,1999-10-30T06:00:00-04:00,45.0,60.0\n"
            "washingtondc,1999-11-02T06:00:00-05:00,40.0,55.0\n"
            "washingtondc,1999-11-02T23:30:00-05:00,38.0,50.0\n"
        )

        weather = load_weather_observations(path)

        assert weather["timestamp"].dt.tz is None
        assert weather["timestamp"].tolist() == [
            pd.Timestamp("1999-10-30 06:00:00"),
            pd.Timestamp("1999-11-02 06:00:00"),
            pd.Timestamp("1999-11-02 23:30:00"),
        ]

    def test_offset_does_not_move_calendar_date(self) -> None:
        """A late-evening reading stays on its local date."""
        frame = pd.DataFrame(
            {
                "location": ["washingtondc"],
                "timestamp": ["1999-12-31T23:00:00-05:00"],
                "temp_min": [28.0],
                "temp_max": [39.0],
            }
        )
        weather = weather_from_frame(frame)
        assert weather.loc[0, "timestamp"].date() == date(1999, 12, 31)
