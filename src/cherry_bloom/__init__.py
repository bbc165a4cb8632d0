"""Cherry Bloom - winter chill features and peak-bloom regression.

Architecture::

    datasources/   CSV ingestion boundary (bloom records, weather observations)
    features/      Winter window, daily aggregation, chill streaks, winter stats
    analysis/      Bloom-feature join and the OLS bloom-date model
    store.py       Tiered on-disk store (inputs → features → reports)
    flows/         Prefect orchestration (one flow runs the whole pipeline)

Data flow: datasources → features → analysis → store (features/, reports/)

Every stage takes a fully materialized DataFrame and returns a new one.
Nothing is mutated in place and nothing is shared between groups.
"""

__version__ = "0.1.0"

from cherry_bloom.config import Settings
from cherry_bloom.schemas import PipelineConfig

__all__ = ["PipelineConfig", "Settings", "__version__"]
