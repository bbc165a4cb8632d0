"""
Prefect flow for the winter-chill feature pipeline and bloom-date fit.

Each stage is a task so a run shows per-stage timing and failures in the
Prefect UI. Tasks pass DataFrames between each other in memory; only the
final tables and the fit report are written to the store.

Run locally:
    python -m cherry_bloom.flows.pipeline BLOOM_CSV WEATHER_CSV
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import pandas as pd
from prefect import flow, task
from prefect.cache_policies import NO_CACHE

from cherry_bloom.analysis.bloom_join import drop_incomplete_rows, join_bloom_features
from cherry_bloom.analysis.pipeline import PipelineResult
from cherry_bloom.analysis.regression import (
    FitSummary,
    fit_bloom_model,
    fit_summary_from_dict,
    fit_summary_to_dict,
)
from cherry_bloom.config import get_settings
from cherry_bloom.datasources import load_bloom_records, load_weather_observations
from cherry_bloom.features import (
    aggregate_daily,
    build_winter_window,
    compute_winter_features,
    detect_chill_streaks,
)
from cherry_bloom.schemas import PipelineConfig
from cherry_bloom.store import DataStore

# Set to a DataStore to override the configured data directory.
store: DataStore | None = None

# Relative paths within the store
FEATURES_PATH = Path("features/winter_features.csv")
MODELED_PATH = Path("features/modeled_rows.csv")
FIT_PATH = Path("reports/fit_summary.json")

SOURCE = "cherry-bloom"


def get_store() -> DataStore:
    """Return the override store, or one rooted at the configured ``data_dir``."""
    if store is not None:
        return store
    return DataStore(get_settings().data_dir)


# =============================================================================
# Stage tasks
# =============================================================================


@task(name="load-bloom-records", cache_policy=NO_CACHE)
def load_bloom(path: Path) -> pd.DataFrame:
    """Load and validate the bloom record table."""
    return load_bloom_records(path)


@task(name="load-weather-observations", cache_policy=NO_CACHE)
def load_weather(path: Path) -> pd.DataFrame:
    """Load and validate the weather observation table."""
    return load_weather_observations(path)


@task(name="build-winter-window", cache_policy=NO_CACHE)
def winter_window(weather: pd.DataFrame) -> pd.DataFrame:
    """Tag readings with bloom year and winter month (Oct-Feb only)."""
    return build_winter_window(weather)


@task(name="aggregate-daily", cache_policy=NO_CACHE)
def daily_summary(windowed: pd.DataFrame) -> pd.DataFrame:
    """Collapse readings to one row per site-day."""
    return aggregate_daily(windowed)


@task(name="detect-chill-streaks", cache_policy=NO_CACHE)
def chill_streaks(daily: pd.DataFrame, config: PipelineConfig) -> pd.DataFrame:
    """Flag winters that reach the required run of cold days."""
    return detect_chill_streaks(
        daily,
        threshold=config.chill_threshold_temp,
        required_days=config.required_chill_streak_days,
    )


@task(name="compute-winter-features", cache_policy=NO_CACHE)
def winter_features(daily: pd.DataFrame, chill: pd.DataFrame) -> pd.DataFrame:
    """Per-winter mean/variance of daily minimums plus the chill flag."""
    return compute_winter_features(daily, chill)


@task(name="join-bloom-features", cache_policy=NO_CACHE)
def join_features(bloom: pd.DataFrame, features: pd.DataFrame, config: PipelineConfig) -> pd.DataFrame:
    """Left-join winter features onto bloom records."""
    return join_bloom_features(
        bloom,
        features,
        minimum_year=config.minimum_year_filter,
        missing_chill_policy=config.missing_chill_policy,
    )


@task(name="fit-bloom-model", cache_policy=NO_CACHE)
def fit_model(modeled: pd.DataFrame, config: PipelineConfig) -> FitSummary:
    """Fit the OLS bloom-date model on rows with complete features."""
    complete = drop_incomplete_rows(modeled, config.feature_columns)
    return fit_bloom_model(complete, feature_set=config.feature_set)


# =============================================================================
# Save tasks
# =============================================================================


@task(name="save-winter-features", cache_policy=NO_CACHE)
def save_features(features: pd.DataFrame, config: PipelineConfig) -> Path:
    """Write the WinterFeature table via store."""
    return get_store().write_table(
        FEATURES_PATH, features, source=SOURCE, config=config.model_dump(mode="json")
    )


@task(name="save-modeled-rows", cache_policy=NO_CACHE)
def save_modeled(modeled: pd.DataFrame, config: PipelineConfig) -> Path:
    """Write the ModeledRow table via store."""
    return get_store().write_table(
        MODELED_PATH, modeled, source=SOURCE, config=config.model_dump(mode="json")
    )


@task(name="save-fit-summary", cache_policy=NO_CACHE)
def save_fit(fit: FitSummary, config: PipelineConfig) -> Path:
    """Write the fit report via store."""
    return get_store().write(
        FIT_PATH, fit_summary_to_dict(fit), source=SOURCE, config=config.model_dump(mode="json")
    )


# =============================================================================
# Stored outputs
# =============================================================================


def load_winter_features() -> pd.DataFrame | None:
    """Load the last stored WinterFeature table, or None if there is none."""
    return get_store().read_table(FEATURES_PATH, parse_dates=["chill_date"])


def load_fit_summary() -> tuple[FitSummary, dict[str, Any]] | None:
    """Load the last stored fit report and its metadata, or None if there is none."""
    data = get_store().read(FIT_PATH)
    if data is None:
        return None
    return fit_summary_from_dict(data), get_store().read_meta(FIT_PATH)


# =============================================================================
# Flows
# =============================================================================


def _build_features(weather: pd.DataFrame, config: PipelineConfig) -> pd.DataFrame:
    print("Building winter window...")
    windowed = winter_window(weather)
    print(f"  {len(windowed)} readings in Oct-Feb windows")

    daily = daily_summary(windowed)
    print(f"  {len(daily)} site-days after daily aggregation")

    chill = chill_streaks(daily, config)
    features = winter_features(daily, chill)
    print(
        f"  {len(features)} site-winters, "
        f"{int(features['chill_satisfied'].sum())} meeting the chill requirement"
    )
    return features


@flow(name="winter-features", log_prints=True)
def winter_features_flow(weather_path: Path, config: PipelineConfig | None = None) -> pd.DataFrame:
    """Build and store the WinterFeature table from a weather CSV."""
    config = config or PipelineConfig()

    print(f"Loading weather observations from {weather_path}...")
    weather = load_weather(weather_path)

    features = _build_features(weather, config)
    output = save_features(features, config)
    print(f"Winter features written: {output}")
    return features


@flow(name="bloom-pipeline", log_prints=True)
def bloom_pipeline(
    bloom_path: Path,
    weather_path: Path,
    config: PipelineConfig | None = None,
) -> PipelineResult:
    """
    Run the full pipeline: features, join, fit, and store outputs.

    Any pipeline error aborts the run; nothing partial is written for the
    failing stage or the stages after it.
    """
    config = config or PipelineConfig()

    print(f"Loading bloom records from {bloom_path}...")
    bloom = load_bloom(bloom_path)
    print(f"Loading weather observations from {weather_path}...")
    weather = load_weather(weather_path)

    features = _build_features(weather, config)
    save_features(features, config)

    print("Joining bloom records with winter features...")
    modeled = join_features(bloom, features, config)
    save_modeled(modeled, config)

    print(f"Fitting bloom model on {', '.join(config.feature_columns)}...")
    fit = fit_model(modeled, config)
    output = save_fit(fit, config)

    print(f"R² = {fit.r_squared:.3f}, RMSE = {fit.rmse:.2f} days ({fit.n_obs} rows)")
    print(f"Fit summary written: {output}")
    return PipelineResult(features=features, modeled=modeled, fit=fit)


if __name__ == "__main__":
    if len(sys.argv) != 3:
        print("usage: python -m cherry_bloom.flows.pipeline BLOOM_CSV WEATHER_CSV", file=sys.stderr)
        sys.exit(2)
    result = bloom_pipeline(Path(sys.argv[1]), Path(sys.argv[2]))
    print(f"Flow complete: {fit_summary_to_dict(result.fit)}")
