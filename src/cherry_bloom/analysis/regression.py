"""Ordinary least squares model of bloom day-of-year.

Model::

    bloom_doy ~ 1 + location + <feature_set>

``location`` is dummy-encoded with the alphabetically first site as the
reference level. Fit quality is reported in-sample only (R² and RMSE over
the training rows).
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import TYPE_CHECKING, Any

import numpy as np
import pandas as pd
import statsmodels.api as sm

from cherry_bloom.errors import InsufficientDataError, RankDeficientModelError
from cherry_bloom.schemas import FeatureName

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)

INTERCEPT = "const"
LOCATION_PREFIX = "location_"


@dataclass(frozen=True)
class CoefficientEstimate:
    """One fitted term with its standard error."""

    term: str
    estimate: float
    std_error: float


@dataclass
class FitSummary:
    """Result of fitting the bloom-date model."""

    coefficients: list[CoefficientEstimate]
    r_squared: float
    rmse: float
    n_obs: int
    feature_set: list[str]
    reference_location: str
    locations: list[str] = field(default_factory=list)

    def coefficient(self, term: str) -> CoefficientEstimate:
        """Look up a fitted term by name (``KeyError`` if absent)."""
        for coef in self.coefficients:
            if coef.term == term:
                return coef
        raise KeyError(term)

    def predict(self, location: str, **features: float) -> float:
        """Fitted bloom day-of-year for a site and its winter features.

        Args:
            location: One of the sites the model was fit on.
            **features: A value for every name in ``feature_set``.

        Raises:
            InsufficientDataError: If the site was not in the training rows or
                a feature value is missing.
        """
        if location not in self.locations:
            msg = f"no training rows for location {location!r}"
            raise InsufficientDataError(msg)

        value = self.coefficient(INTERCEPT).estimate
        if location != self.reference_location:
            value += self.coefficient(f"{LOCATION_PREFIX}{location}").estimate

        for name in self.feature_set:
            x = features.get(name)
            if x is None or (isinstance(x, float) and math.isnan(x)):
                msg = f"missing value for feature {name!r}"
                raise InsufficientDataError(msg)
            value += self.coefficient(name).estimate * float(x)
        return value


def build_design_matrix(
    modeled: pd.DataFrame,
    feature_columns: Sequence[str],
    locations: Sequence[str] | None = None,
) -> pd.DataFrame:
    """Build the OLS design matrix: intercept, location dummies, features.

    Args:
        modeled: ModeledRow table.
        feature_columns: Feature columns to include, in order.
        locations: Location levels; the first is the reference. Defaults to
            the sorted distinct locations in ``modeled``.

    Returns:
        Float DataFrame indexed like ``modeled``.
    """
    if locations is None:
        locations = sorted(modeled["location"].unique())

    dummies = pd.get_dummies(
        pd.Categorical(modeled["location"], categories=list(locations)),
        prefix=LOCATION_PREFIX.rstrip("_"),
        drop_first=True,
        dtype=float,
    )
    dummies.index = modeled.index

    design = pd.concat(
        [
            pd.Series(1.0, index=modeled.index, name=INTERCEPT),
            dummies,
            modeled[list(feature_columns)].astype(float),
        ],
        axis=1,
    )
    return design


def first_redundant_term(design: pd.DataFrame) -> str | None:
    """Name the first column that is a linear combination of earlier ones."""
    values = design.to_numpy(dtype=float)
    for i in range(1, values.shape[1] + 1):
        if np.linalg.matrix_rank(values[:, :i]) < i:
            return str(design.columns[i - 1])
    return None


def _missing_cells(modeled: pd.DataFrame, feature_columns: list[str]) -> list[tuple[str, int]]:
    incomplete = modeled[feature_columns].isna().any(axis=1)
    cells = modeled.loc[incomplete, ["location", "year"]]
    return [(str(loc), int(year)) for loc, year in cells.itertuples(index=False)]


def fit_bloom_model(
    modeled: pd.DataFrame,
    feature_set: Sequence[FeatureName | str] = (FeatureName.MEAN_MIN_TEMP,),
) -> FitSummary:
    """Fit ``bloom_doy`` on location plus the selected winter features.

    Args:
        modeled: ModeledRow table with no missing values in the selected
            features (see ``drop_incomplete_rows``).
        feature_set: Which engineered features enter the model.

    Returns:
        FitSummary with coefficients, standard errors, R² and RMSE.

    Raises:
        InsufficientDataError: No rows, missing feature values, or no more
            rows than parameters.
        RankDeficientModelError: Only one location, or a term that is
            collinear with the terms before it.
    """
    feature_columns = [str(FeatureName(f)) for f in feature_set]

    if modeled.empty:
        msg = "no bloom records to fit"
        raise InsufficientDataError(msg)

    missing = _missing_cells(modeled, feature_columns)
    if missing:
        msg = f"{len(missing)} (location, year) cells lack feature values: {missing[:10]}"
        raise InsufficientDataError(msg)

    locations = sorted(modeled["location"].unique())
    if len(locations) < 2:
        msg = f"only one location ({locations[0]!r}) left after filtering; location cannot be fit"
        raise RankDeficientModelError("location", msg)

    design = build_design_matrix(modeled, feature_columns, locations)
    if len(design) <= design.shape[1]:
        msg = f"{len(design)} rows cannot fit {design.shape[1]} parameters"
        raise InsufficientDataError(msg)

    redundant = first_redundant_term(design)
    if redundant is not None:
        raise RankDeficientModelError(redundant)

    target = modeled["bloom_doy"].astype(float)
    result = sm.OLS(target, design).fit()

    rmse = float(np.sqrt(np.mean(np.square(result.resid))))
    coefficients = [
        CoefficientEstimate(term=str(term), estimate=float(est), std_error=float(se))
        for term, est, se in zip(design.columns, result.params, result.bse, strict=True)
    ]
    logger.info(
        "Fit bloom model on %d rows (%s): R²=%.3f RMSE=%.2f days",
        len(design),
        ", ".join(feature_columns),
        result.rsquared,
        rmse,
    )

    return FitSummary(
        coefficients=coefficients,
        r_squared=float(result.rsquared),
        rmse=rmse,
        n_obs=int(result.nobs),
        feature_set=feature_columns,
        reference_location=locations[0],
        locations=locations,
    )


def doy_to_date(year: int, doy: float) -> date:
    """Convert a (possibly fractional) day-of-year to a calendar date."""
    return date(year, 1, 1) + timedelta(days=int(round(doy)) - 1)


def fit_summary_to_dict(summary: FitSummary) -> dict[str, Any]:
    """Serialize a FitSummary to a JSON-compatible dict."""
    return {
        "n_obs": summary.n_obs,
        "r_squared": round(summary.r_squared, 4),
        "rmse": round(summary.rmse, 3),
        "feature_set": list(summary.feature_set),
        "reference_location": summary.reference_location,
        "locations": list(summary.locations),
        "coefficients": [
            {
                "term": c.term,
                "estimate": round(c.estimate, 4),
                "std_error": round(c.std_error, 4),
            }
            for c in summary.coefficients
        ],
    }


def fit_summary_from_dict(data: dict[str, Any]) -> FitSummary:
    """Rebuild a FitSummary from ``fit_summary_to_dict`` output.

    Values come back at the rounding the dict was written with.
    """
    return FitSummary(
        coefficients=[
            CoefficientEstimate(
                term=c["term"],
                estimate=float(c["estimate"]),
                std_error=float(c["std_error"]),
            )
            for c in data["coefficients"]
        ],
        r_squared=float(data["r_squared"]),
        rmse=float(data["rmse"]),
        n_obs=int(data["n_obs"]),
        feature_set=list(data["feature_set"]),
        reference_location=data["reference_location"],
        locations=list(data["locations"]),
    )
