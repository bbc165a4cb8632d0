"""JSON serialization helpers for winter feature tables."""

from __future__ import annotations

from typing import Any

import pandas as pd


def _round_or_none(value: Any, ndigits: int = 3) -> float | None:
    return None if pd.isna(value) else round(float(value), ndigits)


def winter_features_to_records(features: pd.DataFrame) -> list[dict[str, Any]]:
    """Serialize a WinterFeature table to JSON-compatible dicts.

    Args:
        features: Output of ``compute_winter_features``.

    Returns:
        One dict per winter, in table order. Missing statistics become None.
    """
    return [
        {
            "location": row.location,
            "bloom_year": int(row.bloom_year),
            "mean_min_temp": _round_or_none(row.mean_min_temp),
            "var_min_temp": _round_or_none(row.var_min_temp),
            "n_days": int(row.n_days),
            "chill_satisfied": bool(row.chill_satisfied),
            "chill_date": None if pd.isna(row.chill_date) else row.chill_date.date().isoformat(),
        }
        for row in features.itertuples(index=False)
    ]
