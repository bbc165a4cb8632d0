"""
Domain models for the bloom pipeline.

Pydantic models for the two input record types and for pipeline configuration.
Loaders validate each input row against these before it becomes part of a
DataFrame; the derived tables themselves stay as DataFrames (see
``features/models.py`` for their column layouts).
"""

from __future__ import annotations

import math
from datetime import date, datetime
from enum import StrEnum

from pydantic import BaseModel, Field, field_validator, model_validator

# Default chill parameters (degrees Fahrenheit, days)
DEFAULT_CHILL_THRESHOLD_F = 41.0
DEFAULT_CHILL_STREAK_DAYS = 30

# =============================================================================
# Input records
# =============================================================================


class BloomRecord(BaseModel):
    """One observed peak bloom for a site and year."""

    model_config = {"str_strip_whitespace": True, "frozen": True}

    location: str = Field(..., min_length=1)
    lat: float = Field(..., ge=-90, le=90)
    long: float = Field(..., ge=-180, le=180)
    alt: float
    year: int
    bloom_date: date
    bloom_doy: int = Field(..., ge=1, le=366)

    @model_validator(mode="after")
    def _doy_matches_date(self) -> BloomRecord:
        if self.bloom_date.year != self.year:
            msg = f"bloom_date {self.bloom_date} is not in year {self.year}"
            raise ValueError(msg)
        actual = self.bloom_date.timetuple().tm_yday
        if actual != self.bloom_doy:
            msg = f"bloom_doy {self.bloom_doy} does not match bloom_date {self.bloom_date} (doy {actual})"
            raise ValueError(msg)
        return self


class WeatherObservation(BaseModel):
    """A single weather reading for a site. Sub-daily readings are allowed."""

    model_config = {"str_strip_whitespace": True, "frozen": True}

    location: str = Field(..., min_length=1)
    timestamp: datetime
    temp_min: float
    temp_max: float
    pressure: float | None = None
    humidity: float | None = None


# =============================================================================
# Pipeline configuration
# =============================================================================


class FeatureName(StrEnum):
    """Engineered features that may enter the regression."""

    MEAN_MIN_TEMP = "mean_min_temp"
    VAR_MIN_TEMP = "var_min_temp"
    CHILL_SATISFIED = "chill_satisfied"


class MissingChillPolicy(StrEnum):
    """What the joiner writes into ``chill_satisfied`` when a bloom year has no features.

    FALSE reads "no weather rows" as "no qualifying streak". That only holds when
    the caller has already restricted bloom records to years with weather coverage.
    MISSING leaves the flag null so the row can be excluded before fitting.
    """

    FALSE = "false"
    MISSING = "missing"


class PipelineConfig(BaseModel):
    """Options shared by every pipeline stage."""

    model_config = {"frozen": True}

    chill_threshold_temp: float = DEFAULT_CHILL_THRESHOLD_F
    required_chill_streak_days: int = Field(default=DEFAULT_CHILL_STREAK_DAYS, ge=1)
    minimum_year_filter: int | None = None
    feature_set: tuple[FeatureName, ...] = (FeatureName.MEAN_MIN_TEMP,)
    missing_chill_policy: MissingChillPolicy = MissingChillPolicy.FALSE

    @field_validator("chill_threshold_temp")
    @classmethod
    def _finite_threshold(cls, value: float) -> float:
        if not math.isfinite(value):
            msg = "chill_threshold_temp must be finite"
            raise ValueError(msg)
        return value

    @field_validator("feature_set")
    @classmethod
    def _non_empty_unique(cls, value: tuple[FeatureName, ...]) -> tuple[FeatureName, ...]:
        if not value:
            msg = "feature_set must name at least one feature"
            raise ValueError(msg)
        if len(set(value)) != len(value):
            msg = f"feature_set has duplicates: {[str(v) for v in value]}"
            raise ValueError(msg)
        return value

    @property
    def feature_columns(self) -> list[str]:
        """Feature set as plain column names, in configured order."""
        return [str(f) for f in self.feature_set]
