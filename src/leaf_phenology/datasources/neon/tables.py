"""Read NEON phenology CSV exports into DataFrames."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pandas as pd

from leaf_phenology.datasources.neon.models import (
    REQUIRED_INDIVIDUAL_COLUMNS,
    REQUIRED_STATUS_COLUMNS,
)
from leaf_phenology.errors import SchemaError

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path


def require_columns(df: pd.DataFrame, columns: Iterable[str], table: str) -> None:
    """Raise SchemaError if any of ``columns`` is absent from ``df``.

    Args:
        df: Table to check.
        columns: Column names that must be present.
        table: Human-readable table name for the error message.
    """
    missing = [c for c in columns if c not in df.columns]
    if missing:
        msg = f"{table} table is missing required column(s): {', '.join(missing)}"
        raise SchemaError(msg)


def read_status_table(path: Path) -> pd.DataFrame:
    """Read a ``phe_statusintensity`` CSV export.

    Everything is read as text; date parsing happens in the date normalizer
    so malformed values surface as data-quality errors, not parse crashes.
    """
    df = pd.read_csv(path, dtype=str, keep_default_na=True)
    require_columns(df, REQUIRED_STATUS_COLUMNS, "status")
    return df


def read_individual_table(path: Path) -> pd.DataFrame:
    """Read a ``phe_perindividual`` CSV export."""
    df = pd.read_csv(path, dtype=str, keep_default_na=True)
    require_columns(df, REQUIRED_INDIVIDUAL_COLUMNS, "individual")
    return df
