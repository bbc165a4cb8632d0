"""
Command-line interface for the application.

This module provides the main entry point for the CLI.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from cherry_bloom import __version__
from cherry_bloom.analysis.regression import FitSummary
from cherry_bloom.config import get_settings
from cherry_bloom.errors import CherryBloomError
from cherry_bloom.features import winter_features_to_records
from cherry_bloom.flows.pipeline import (
    bloom_pipeline,
    get_store,
    load_fit_summary,
    load_winter_features,
    winter_features_flow,
)
from cherry_bloom.schemas import FeatureName, PipelineConfig


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="cherry-bloom",
        description="Winter chill features and peak-bloom regression for cherry trees",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("info", help="Show application info and pipeline settings")

    features_parser = subparsers.add_parser("features", help="Build the winter feature table")
    features_parser.add_argument("--weather", type=Path, required=True, help="Weather CSV")
    _add_chill_options(features_parser)

    fit_parser = subparsers.add_parser("fit", help="Run the full pipeline and fit the model")
    fit_parser.add_argument("--bloom", type=Path, required=True, help="Bloom record CSV")
    fit_parser.add_argument("--weather", type=Path, required=True, help="Weather CSV")
    _add_chill_options(fit_parser)
    fit_parser.add_argument(
        "--min-year",
        type=int,
        default=None,
        help="Only use bloom records after this year",
    )
    fit_parser.add_argument(
        "--features",
        nargs="+",
        choices=[str(f) for f in FeatureName],
        default=None,
        help="Features entering the regression (default: from settings)",
    )

    report_parser = subparsers.add_parser("report", help="Show the last stored fit or features")
    report_parser.add_argument(
        "--features",
        action="store_true",
        help="Print the stored winter feature table as JSON instead of the fit",
    )

    return parser


def _add_chill_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--threshold",
        type=float,
        default=None,
        help="Chill threshold temperature (default: from settings)",
    )
    parser.add_argument(
        "--streak-days",
        type=int,
        default=None,
        help="Consecutive cold days required (default: from settings)",
    )


def build_config(args: argparse.Namespace) -> PipelineConfig:
    """Merge command-line overrides into the configured pipeline options."""
    config = get_settings().pipeline_config()
    overrides = {
        "chill_threshold_temp": getattr(args, "threshold", None),
        "required_chill_streak_days": getattr(args, "streak_days", None),
        "minimum_year_filter": getattr(args, "min_year", None),
        "feature_set": tuple(args.features) if getattr(args, "features", None) else None,
    }
    values = config.model_dump()
    values.update({k: v for k, v in overrides.items() if v is not None})
    return PipelineConfig(**values)


def print_fit_summary(fit: FitSummary) -> None:
    """Print the coefficient table and fit quality."""
    print(f"Rows: {fit.n_obs}  Reference location: {fit.reference_location}")
    print(f"{'term':<32}{'estimate':>12}{'std err':>12}")
    for coef in fit.coefficients:
        print(f"{coef.term:<32}{coef.estimate:>12.3f}{coef.std_error:>12.3f}")
    print(f"R²: {fit.r_squared:.3f}")
    print(f"RMSE: {fit.rmse:.2f} days")


def cmd_info(_args: argparse.Namespace) -> int:
    """Handle the 'info' command."""
    settings = get_settings()
    print(f"Application: {settings.app_name}")
    print(f"Version: {__version__}")
    print(f"Environment: {settings.app_env}")
    print(f"Debug: {settings.debug}")
    print(f"Data dir: {settings.data_dir}")
    print(f"Chill threshold: {settings.chill_threshold_temp}")
    print(f"Chill streak days: {settings.required_chill_streak_days}")
    print(f"Minimum year: {settings.minimum_year_filter}")
    print(f"Features: {', '.join(str(f) for f in settings.feature_set)}")
    print(f"Missing chill policy: {settings.missing_chill_policy}")
    return 0


def cmd_features(args: argparse.Namespace) -> int:
    """Handle the 'features' command: build and store winter features."""
    config = build_config(args)
    features = winter_features_flow(weather_path=args.weather, config=config)
    print(f"{len(features)} site-winters written.")
    return 0


def cmd_fit(args: argparse.Namespace) -> int:
    """Handle the 'fit' command: run the whole pipeline and report the fit."""
    config = build_config(args)
    result = bloom_pipeline(bloom_path=args.bloom, weather_path=args.weather, config=config)
    print_fit_summary(result.fit)
    return 0


def cmd_report(args: argparse.Namespace) -> int:
    """Handle the 'report' command: print outputs of the last run from the store."""
    base = get_store().base
    if args.features:
        features = load_winter_features()
        if features is None:
            msg = f"No winter features in {base}; run 'cherry-bloom features' first."
            print(msg, file=sys.stderr)
            return 1
        print(json.dumps(winter_features_to_records(features), indent=2))
        return 0

    stored = load_fit_summary()
    if stored is None:
        print(f"No fit summary in {base}; run 'cherry-bloom fit' first.", file=sys.stderr)
        return 1
    fit, meta = stored
    print(f"Written: {meta.get('written_at', 'unknown')}")
    print_fit_summary(fit)
    return 0


def main() -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        return 0

    logging.basicConfig(
        level=logging.DEBUG if args.debug or get_settings().debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    commands = {
        "info": cmd_info,
        "features": cmd_features,
        "fit": cmd_fit,
        "report": cmd_report,
    }

    handler = commands.get(args.command)
    if not handler:
        parser.print_help()
        return 1

    try:
        return handler(args)
    except (CherryBloomError, ValidationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
