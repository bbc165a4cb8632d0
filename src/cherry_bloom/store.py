"""Tiered data store for pipeline inputs and outputs.

Files are organized into tiers by where they sit in the pipeline:
  - inputs/:   Clean bloom and weather tables handed over by ingestion
  - features/: Derived tables (WinterFeature, ModeledRow), rewritten every run
  - reports/:  Fit summaries

JSON files are wrapped in a metadata envelope (``{"meta": ..., "data": ...}``).
Tables are written as CSV with a sidecar ``.meta.json`` holding the same
metadata, so the CSV itself stays readable by any tool.
"""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path  # noqa: TC003
from typing import TYPE_CHECKING, Any

import pandas as pd

if TYPE_CHECKING:
    from collections.abc import Sequence


class DataStore:
    """Reads and writes pipeline tables and reports under one base directory."""

    def __init__(self, base_dir: Path) -> None:
        self.base = base_dir
        self.inputs = base_dir / "inputs"
        self.features = base_dir / "features"
        self.reports = base_dir / "reports"

    def read(self, path: Path) -> dict[str, Any] | None:
        """Read data payload from a metadata-enveloped JSON file.

        Returns the ``data`` field, or None if the file doesn't exist.
        """
        envelope = self.read_raw(path)
        if envelope is None:
            return None
        return envelope.get("data", envelope)

    def read_raw(self, path: Path) -> dict[str, Any] | None:
        """Read the full envelope (meta + data) from a JSON file."""
        full = self._resolve(path)
        if not full.exists():
            return None
        with full.open() as f:
            result: dict[str, Any] = json.load(f)
        return result

    def write(self, path: Path, data: Any, source: str, **params: Any) -> Path:
        """Write data wrapped in a metadata envelope.

        Args:
            path: Relative path under base_dir (e.g. ``reports/fit_summary.json``).
            data: Payload to store under the ``data`` key.
            source: Producer identifier (e.g. ``"bloom-pipeline"``).
            **params: Extra metadata fields (config values, row counts, ...).

        Returns:
            Absolute path of the written file.
        """
        full = self._resolve(path)
        full.parent.mkdir(parents=True, exist_ok=True)

        envelope = {"meta": self._meta(source, params), "data": data}
        with full.open("w") as f:
            json.dump(envelope, f, indent=2)

        return full

    def write_table(self, path: Path, frame: pd.DataFrame, source: str, **params: Any) -> Path:
        """Write a DataFrame as CSV with sidecar metadata.

        Row order and column order are written exactly as given, so the same
        frame always produces the same bytes.

        Returns:
            Absolute path of the CSV file.
        """
        full = self._resolve(path)
        full.parent.mkdir(parents=True, exist_ok=True)
        frame.to_csv(full, index=False, date_format="%Y-%m-%d")

        meta = self._meta(source, {"rows": len(frame), "columns": list(frame.columns), **params})
        with self._sidecar(full).open("w") as f:
            json.dump({"meta": meta}, f, indent=2)

        return full

    def read_table(self, path: Path, parse_dates: Sequence[str] = ()) -> pd.DataFrame | None:
        """Read a CSV table, or None if it doesn't exist.

        Args:
            path: Relative path under base_dir.
            parse_dates: Columns to parse as datetimes.
        """
        full = self._resolve(path)
        if not full.exists():
            return None
        return pd.read_csv(full, parse_dates=list(parse_dates))

    def read_meta(self, path: Path) -> dict[str, Any]:
        """Read metadata from either a JSON envelope or a sidecar .meta.json."""
        full = self._resolve(path)
        sidecar = self._sidecar(full)
        if sidecar.exists():
            with sidecar.open() as f:
                result: dict[str, Any] = json.load(f)
            return result.get("meta", {})

        if full.suffix == ".json" and full.exists():
            envelope = self.read_raw(path) or {}
            return envelope.get("meta", {})

        return {}

    def _meta(self, source: str, params: dict[str, Any]) -> dict[str, Any]:
        meta: dict[str, Any] = {
            "source": source,
            "written_at": datetime.now(UTC).isoformat(),
        }
        meta.update(params)
        return meta

    @staticmethod
    def _sidecar(full: Path) -> Path:
        return full.with_suffix(full.suffix + ".meta.json")

    def _resolve(self, path: Path) -> Path:
        full = self.base / path if not path.is_absolute() else path
        try:
            full.resolve().relative_to(self.base.resolve())
        except ValueError:
            msg = f"Path escapes store base directory: {path}"
            raise ValueError(msg) from None
        return full
