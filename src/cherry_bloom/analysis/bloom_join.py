"""Join bloom records with engineered winter features.

Missing-data policy, field by field, for bloom years with no WinterFeature row:

  - ``chill_satisfied``: set by ``MissingChillPolicy``. FALSE (the default)
    reads "no weather" as "no qualifying streak", which is only sound when
    the caller has restricted bloom records to years with weather coverage.
    MISSING leaves the flag null.
  - ``mean_min_temp`` / ``var_min_temp``: always left missing. They are
    never zero-filled; call ``drop_incomplete_rows`` (or impute) before fitting.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

import pandas as pd

from cherry_bloom.schemas import MissingChillPolicy

logger = logging.getLogger(__name__)

MODELED_COLUMNS = [
    "location",
    "year",
    "bloom_doy",
    "alt",
    "mean_min_temp",
    "var_min_temp",
    "chill_satisfied",
]


def filter_bloom_years(bloom: pd.DataFrame, minimum_year: int | None = None) -> pd.DataFrame:
    """Keep bloom records with ``year > minimum_year`` (all of them when None)."""
    if minimum_year is None:
        return bloom
    kept = bloom.loc[bloom["year"] > minimum_year]
    logger.info("Year filter > %d kept %d of %d bloom records", minimum_year, len(kept), len(bloom))
    return kept


def join_bloom_features(
    bloom: pd.DataFrame,
    features: pd.DataFrame,
    minimum_year: int | None = None,
    missing_chill_policy: MissingChillPolicy = MissingChillPolicy.FALSE,
) -> pd.DataFrame:
    """Left-join winter features onto bloom records by (location, year).

    Args:
        bloom: BloomRecord table.
        features: WinterFeature table (unique on location, bloom_year).
        minimum_year: Optional year cutoff applied to ``bloom`` first.
        missing_chill_policy: How to fill ``chill_satisfied`` for unmatched rows.

    Returns:
        ModeledRow table with exactly one row per retained bloom record, in
        bloom-record order.
    """
    retained = filter_bloom_years(bloom, minimum_year)

    right = features[["location", "bloom_year", "mean_min_temp", "var_min_temp", "chill_satisfied"]]
    right = right.rename(columns={"bloom_year": "year"})

    modeled = retained[["location", "year", "bloom_doy", "alt"]].merge(
        right,
        on=["location", "year"],
        how="left",
        validate="many_to_one",
        indicator=True,
    )

    unmatched = int((modeled["_merge"] == "left_only").sum())
    if unmatched:
        logger.warning(
            "%d of %d bloom records have no winter features (chill policy: %s)",
            unmatched,
            len(modeled),
            missing_chill_policy,
        )

    flags = modeled["chill_satisfied"].astype("boolean")
    if missing_chill_policy == MissingChillPolicy.FALSE:
        modeled["chill_satisfied"] = flags.fillna(False).astype(bool)
    else:
        modeled["chill_satisfied"] = flags

    return modeled.drop(columns="_merge").reset_index(drop=True)[MODELED_COLUMNS]


def drop_incomplete_rows(modeled: pd.DataFrame, feature_columns: Iterable[str]) -> pd.DataFrame:
    """Remove rows missing any of the given feature columns.

    The explicit exclusion step the fit requires for bloom years without
    weather coverage.
    """
    columns = list(feature_columns)
    complete = modeled.dropna(subset=columns).reset_index(drop=True)
    dropped = len(modeled) - len(complete)
    if dropped:
        logger.info("Excluded %d rows missing %s", dropped, ", ".join(columns))
    return complete
