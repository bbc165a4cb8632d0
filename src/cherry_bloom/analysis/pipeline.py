"""Run every stage in order on in-memory tables.

``run_pipeline`` is the plain-function form of ``flows.pipeline.bloom_pipeline``:
same stages, same outputs, no Prefect and no store.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import pandas as pd

from cherry_bloom.analysis.bloom_join import drop_incomplete_rows, join_bloom_features
from cherry_bloom.analysis.regression import FitSummary, fit_bloom_model
from cherry_bloom.features import (
    aggregate_daily,
    build_winter_window,
    compute_winter_features,
    detect_chill_streaks,
)
from cherry_bloom.schemas import PipelineConfig

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    """Everything one pipeline run produces."""

    features: pd.DataFrame
    modeled: pd.DataFrame
    fit: FitSummary


def build_winter_features(weather: pd.DataFrame, config: PipelineConfig | None = None) -> pd.DataFrame:
    """Weather observations -> WinterFeature table (stages 1-4)."""
    config = config or PipelineConfig()
    daily = aggregate_daily(build_winter_window(weather))
    chill = detect_chill_streaks(
        daily,
        threshold=config.chill_threshold_temp,
        required_days=config.required_chill_streak_days,
    )
    return compute_winter_features(daily, chill)


def run_pipeline(
    bloom: pd.DataFrame,
    weather: pd.DataFrame,
    config: PipelineConfig | None = None,
) -> PipelineResult:
    """Bloom records + weather observations -> features, modeled rows, fit.

    Rows whose selected features are missing are excluded before fitting;
    the returned ``modeled`` table still holds every retained bloom record.
    """
    config = config or PipelineConfig()
    features = build_winter_features(weather, config)
    modeled = join_bloom_features(
        bloom,
        features,
        minimum_year=config.minimum_year_filter,
        missing_chill_policy=config.missing_chill_policy,
    )
    fit = fit_bloom_model(
        drop_incomplete_rows(modeled, config.feature_columns),
        feature_set=config.feature_set,
    )
    return PipelineResult(features=features, modeled=modeled, fit=fit)
