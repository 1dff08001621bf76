"""File store for analysis inputs and outputs.

Two tiers under one base directory:
  - raw/: NEON CSV exports as downloaded (never written by the pipeline)
  - derived/: Computed outputs, always rewritten (fit results, joined tables)

JSON outputs are wrapped in a metadata envelope (``{"meta": ..., "data": ...}``).
Tables are written as CSV with a sidecar ``.meta.json`` so the CSV stays
readable by any tool.
"""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import pandas as pd

if TYPE_CHECKING:
    from pathlib import Path


class DataStore:
    """Manages read/write of data files under a base directory."""

    def __init__(self, base_dir: Path) -> None:
        self.base = base_dir
        self.raw = base_dir / "raw"
        self.derived = base_dir / "derived"

    def read(self, path: Path) -> Any:
        """Read data payload from a metadata-enveloped JSON file.

        Returns the ``data`` field, or None if the file doesn't exist.
        """
        full = self._resolve(path)
        if not full.exists():
            return None
        with full.open() as f:
            envelope: dict[str, Any] = json.load(f)
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
            path: Relative path under base_dir (e.g. ``derived/fits/species_fits.json``).
            data: Payload to store under the ``data`` key.
            source: Producer identifier (e.g. ``"leaf-phenology"``).
            **params: Extra metadata fields (grid, model constants, ...).

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
        """Write a DataFrame as CSV with a sidecar ``.meta.json``.

        Args:
            path: Relative destination path (e.g. ``derived/tables/joined.csv``).
            frame: Table to write (index is not written).
            source: Producer identifier.
            **params: Extra metadata fields.

        Returns:
            Absolute path of the CSV file.
        """
        full = self._resolve(path)
        full.parent.mkdir(parents=True, exist_ok=True)
        frame.to_csv(full, index=False)

        meta = self._meta(source, params)
        meta["rows"] = len(frame)
        meta["columns"] = [str(c) for c in frame.columns]
        with self._sidecar(full).open("w") as f:
            json.dump({"meta": meta}, f, indent=2)

        return full

    def read_table(self, path: Path) -> pd.DataFrame | None:
        """Read a CSV written by ``write_table``, or None if missing."""
        full = self._resolve(path)
        if not full.exists():
            return None
        return pd.read_csv(full)

    def read_meta(self, path: Path) -> dict[str, Any]:
        """Metadata for a stored file, from its sidecar or JSON envelope."""
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

    def file_path(self, path: Path) -> Path | None:
        """Return the absolute path of a stored file, or None if missing."""
        full = self._resolve(path)
        return full if full.exists() else None

    def _meta(self, source: str, params: dict[str, Any]) -> dict[str, Any]:
        meta: dict[str, Any] = {
            "source": source,
            "written_at": datetime.now(UTC).isoformat(),
        }
        if params:
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
