"""
Application configuration.

Settings are read from environment variables prefixed with ``CHERRY_BLOOM_``
and from an optional ``.env`` file in the working directory.

Example::

    CHERRY_BLOOM_CHILL_THRESHOLD_TEMP=40
    CHERRY_BLOOM_MINIMUM_YEAR_FILTER=1950
    CHERRY_BLOOM_FEATURE_SET='["mean_min_temp", "chill_satisfied"]'
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from cherry_bloom.schemas import (
    DEFAULT_CHILL_STREAK_DAYS,
    DEFAULT_CHILL_THRESHOLD_F,
    FeatureName,
    MissingChillPolicy,
    PipelineConfig,
)


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="CHERRY_BLOOM_",
        env_file=".env",
        extra="ignore",
    )

    app_name: str = "cherry-bloom"
    app_env: str = "development"
    debug: bool = False
    data_dir: Path = Path("data")

    # Pipeline options
    chill_threshold_temp: float = DEFAULT_CHILL_THRESHOLD_F
    required_chill_streak_days: int = DEFAULT_CHILL_STREAK_DAYS
    minimum_year_filter: int | None = None
    feature_set: list[FeatureName] = Field(default_factory=lambda: [FeatureName.MEAN_MIN_TEMP])
    missing_chill_policy: MissingChillPolicy = MissingChillPolicy.FALSE

    def pipeline_config(self) -> PipelineConfig:
        """Build the immutable config object every pipeline stage takes."""
        return PipelineConfig(
            chill_threshold_temp=self.chill_threshold_temp,
            required_chill_streak_days=self.required_chill_streak_days,
            minimum_year_filter=self.minimum_year_filter,
            feature_set=tuple(self.feature_set),
            missing_chill_policy=self.missing_chill_policy,
        )


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings (cached after first call)."""
    return Settings()
