"""
Prefect flows for the bloom pipeline.

Flows:
- pipeline.winter_features_flow: weather CSV -> WinterFeature table in the store
- pipeline.bloom_pipeline: bloom + weather CSVs -> features, modeled rows, fit report

Outputs go to the store under ``Settings.data_dir`` (``CHERRY_BLOOM_DATA_DIR``);
``pipeline.load_winter_features`` and ``pipeline.load_fit_summary`` read them back.

Usage (local):
    python -m cherry_bloom.flows.pipeline data/inputs/bloom.csv data/inputs/weather.csv

Usage (Prefect):
    prefect server start  # Optional, for dashboard
    cherry-bloom fit --bloom data/inputs/bloom.csv --weather data/inputs/weather.csv
"""
