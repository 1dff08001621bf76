"""Convert calendar dates into integer day offsets.

Offsets are whole days from a reference date: either the earliest date in the
whole table (the default, and what species aggregates use) or the earliest
date within each group.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pandas as pd

from leaf_phenology.datasources.neon.models import DATE, DAY_OFFSET
from leaf_phenology.datasources.neon.tables import require_columns
from leaf_phenology.errors import DataQualityError

if TYPE_CHECKING:
    from datetime import date


def parse_dates(values: pd.Series, column: str = DATE) -> pd.Series:
    """Parse a column of dates/timestamps into naive UTC timestamps.

    Missing values stay NaT. Values that are present but unparseable raise,
    since silently dropping them would shift every offset in the group.

    Raises:
        DataQualityError: If any non-missing value cannot be parsed.
    """
    parsed = pd.to_datetime(values, errors="coerce", format="mixed", utc=True)
    bad = parsed.isna() & values.notna()
    if bad.any():
        sample = ", ".join(str(v) for v in values[bad].unique()[:3])
        msg = f"Unparseable {column} value(s): {sample}"
        raise DataQualityError(msg)
    return parsed.dt.tz_localize(None)


def earliest_date(values: pd.Series) -> pd.Timestamp | None:
    """Return the earliest calendar day in ``values``, or None if there is none."""
    parsed = parse_dates(values).dt.normalize()
    first = parsed.min()
    return None if pd.isna(first) else first


def day_offsets(
    values: pd.Series,
    reference: date | pd.Timestamp | str | None = None,
) -> pd.Series:
    """Whole days from ``reference`` (default: the earliest value) to each date.

    Returns:
        Nullable integer series aligned with ``values``; missing dates map
        to ``<NA>``.

    Raises:
        DataQualityError: If a date precedes an explicit ``reference``.
    """
    days = parse_dates(values, str(values.name or DATE)).dt.normalize()
    ref = days.min() if reference is None else pd.Timestamp(reference).normalize()
    offsets = (days - ref).dt.days.astype("Int64")
    if (offsets < 0).any():
        msg = f"Reference date {ref.date()} is after the earliest observation {days.min().date()}"
        raise DataQualityError(msg)
    return offsets


def add_day_offsets(
    df: pd.DataFrame,
    date_column: str = DATE,
    by: str | None = None,
    reference: date | pd.Timestamp | str | None = None,
    out: str = DAY_OFFSET,
) -> pd.DataFrame:
    """Return a copy of ``df`` with an integer day-offset column.

    Args:
        df: Input table.
        date_column: Column holding observation dates.
        by: Optional grouping column. Each group is then measured from its
            own earliest date.
        reference: Explicit reference date for ungrouped offsets. Defaults to
            the earliest date in ``df``.
        out: Name of the new column.

    Raises:
        SchemaError: If ``date_column`` or ``by`` is missing.
        ValueError: If both ``by`` and ``reference`` are given.
    """
    if by is not None and reference is not None:
        msg = "Pass either 'by' or 'reference', not both"
        raise ValueError(msg)
    require_columns(df, [date_column] if by is None else [date_column, by], "input")

    if by is None:
        offsets = day_offsets(df[date_column], reference)
    else:
        days = parse_dates(df[date_column], date_column).dt.normalize()
        firsts = days.groupby(df[by]).transform("min")
        offsets = (days - firsts).dt.days.astype("Int64")

    return df.assign(**{out: offsets})
