"""Feature Aggregator: per-winter temperature statistics plus the chill flag."""

from __future__ import annotations

import logging

import pandas as pd

from cherry_bloom.features.models import GROUP_KEY, WINTER_FEATURE_COLUMNS
from cherry_bloom.features.streak import detect_chill_streaks
from cherry_bloom.schemas import DEFAULT_CHILL_STREAK_DAYS, DEFAULT_CHILL_THRESHOLD_F

logger = logging.getLogger(__name__)


def compute_winter_features(
    daily: pd.DataFrame,
    chill: pd.DataFrame | None = None,
    threshold: float = DEFAULT_CHILL_THRESHOLD_F,
    required_days: int = DEFAULT_CHILL_STREAK_DAYS,
) -> pd.DataFrame:
    """Summarize each (location, bloom_year) winter into one WinterFeature row.

    ``var_min_temp`` is the sample variance (n - 1 denominator). A winter with
    a single observed day gets NaN rather than an error.

    Args:
        daily: DailyWeatherSummary table.
        chill: Output of ``detect_chill_streaks`` for the same table. Computed
            here with ``threshold`` / ``required_days`` when omitted.
        threshold: Chill threshold used when ``chill`` is omitted.
        required_days: Streak length used when ``chill`` is omitted.

    Returns:
        WinterFeature table, unique on (location, bloom_year), sorted by key.

    Raises:
        ValueError: If ``chill`` does not cover every winter in ``daily``.
    """
    if chill is None:
        chill = detect_chill_streaks(daily, threshold=threshold, required_days=required_days)

    if daily.empty:
        return pd.DataFrame(
            {
                "location": pd.Series(dtype="object"),
                "bloom_year": pd.Series(dtype="int64"),
                "mean_min_temp": pd.Series(dtype="float64"),
                "var_min_temp": pd.Series(dtype="float64"),
                "n_days": pd.Series(dtype="int64"),
                "chill_satisfied": pd.Series(dtype="bool"),
                "chill_date": pd.Series(dtype="datetime64[ns]"),
            }
        )[WINTER_FEATURE_COLUMNS]

    stats = (
        daily.assign(min_temp=daily["min_temp"].astype("float64"))
        .groupby(GROUP_KEY, sort=True)["min_temp"]
        .agg(mean_min_temp="mean", var_min_temp="var", n_days="size")
        .reset_index()
    )
    stats["bloom_year"] = stats["bloom_year"].astype("int64")

    features = stats.merge(
        chill[[*GROUP_KEY, "chill_satisfied", "chill_date"]],
        on=GROUP_KEY,
        how="left",
        validate="one_to_one",
        indicator=True,
    )
    uncovered = features["_merge"] != "both"
    if uncovered.any():
        keys = features.loc[uncovered, GROUP_KEY].to_records(index=False).tolist()
        msg = f"chill flags missing for winters: {keys}"
        raise ValueError(msg)

    features = features.drop(columns="_merge")
    features["chill_satisfied"] = features["chill_satisfied"].astype(bool)

    logger.info("Computed winter features for %d site-winters", len(features))
    return features[WINTER_FEATURE_COLUMNS]
