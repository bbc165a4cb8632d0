"""Cross-table joins and the bloom-date model.

Dependency rule: analysis/ imports from features/ and schemas only.
It never reads files and never touches the store.

Modules:
  - bloom_join: bloom records + winter features -> ModeledRow table
  - regression: ModeledRow table -> OLS FitSummary (R², RMSE, coefficients)
  - pipeline:   stages 1-6 chained on in-memory tables
"""

from cherry_bloom.analysis.bloom_join import (
    MODELED_COLUMNS,
    drop_incomplete_rows,
    filter_bloom_years,
    join_bloom_features,
)
from cherry_bloom.analysis.pipeline import PipelineResult, build_winter_features, run_pipeline
from cherry_bloom.analysis.regression import (
    CoefficientEstimate,
    FitSummary,
    build_design_matrix,
    doy_to_date,
    first_redundant_term,
    fit_bloom_model,
    fit_summary_from_dict,
    fit_summary_to_dict,
)

__all__ = [
    "MODELED_COLUMNS",
    "CoefficientEstimate",
    "FitSummary",
    "PipelineResult",
    "build_design_matrix",
    "build_winter_features",
    "doy_to_date",
    "drop_incomplete_rows",
    "filter_bloom_years",
    "first_redundant_term",
    "fit_bloom_model",
    "fit_summary_from_dict",
    "fit_summary_to_dict",
    "join_bloom_features",
    "run_pipeline",
]
