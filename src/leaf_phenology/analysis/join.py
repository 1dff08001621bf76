"""Clean and join NEON status observations with per-individual metadata.

The status table has one row per (individual, date, phenophase); the
individual table has one row per tagging edit. The join keeps every status
row and attaches the most recent metadata for its individual:

    status ──clean──> prepare_status ──┐
                                       ├── left join ──> drop_empty_columns
    individuals ──clean──> latest ─────┘
"""

from __future__ import annotations

import warnings
from typing import TYPE_CHECKING

from leaf_phenology.analysis.dates import parse_dates
from leaf_phenology.datasources.neon.models import (
    DATE,
    EDITED_DATE,
    INDIVIDUAL_ID,
    INDIVIDUAL_SUFFIX,
    STATUS_REDUNDANT_COLUMNS,
    STATUS_SUFFIX,
    UID,
)
from leaf_phenology.datasources.neon.tables import require_columns
from leaf_phenology.errors import DataQualityError, DataQualityWarning
from leaf_phenology.schemas import TiePolicy

if TYPE_CHECKING:
    from collections.abc import Iterable

    import pandas as pd


def clean_table(df: pd.DataFrame, id_column: str = UID) -> pd.DataFrame:
    """Drop the row-id column and exact-duplicate rows.

    The id column is unique per row, so duplicates can only be found once it
    is gone.
    """
    out = df.drop(columns=[id_column], errors="ignore")
    return out.drop_duplicates().reset_index(drop=True)


def latest_individuals(
    individuals: pd.DataFrame,
    on_tie: TiePolicy = TiePolicy.ERROR,
) -> pd.DataFrame:
    """Keep one metadata row per individual: the one with the latest edit.

    Exact duplicates at the latest ``editedDate`` collapse silently. Rows that
    tie on the date but differ in content are ambiguous: with
    ``on_tie="error"`` they raise, with ``on_tie="first"`` the first row in
    input order is kept and a DataQualityWarning is issued.

    Args:
        individuals: Per-individual table (``uid`` already removed or not).
        on_tie: Policy for divergent rows sharing the latest edited date.

    Returns:
        New frame with exactly one row per individualID, in first-seen order.

    Raises:
        SchemaError: If ``individualID`` or ``editedDate`` is missing.
        DataQualityError: On a divergent tie under ``on_tie="error"``, or if
            an edited date cannot be parsed.
    """
    require_columns(individuals, (INDIVIDUAL_ID, EDITED_DATE), "individual")
    policy = TiePolicy(on_tie)

    deduped = individuals.drop_duplicates()
    edited = parse_dates(deduped[EDITED_DATE], EDITED_DATE)
    latest = edited.groupby(deduped[INDIVIDUAL_ID]).transform("max")
    # Individuals with no edited date at all keep their undated rows
    at_latest = (edited == latest) | (edited.isna() & latest.isna())
    candidates = deduped[at_latest & deduped[INDIVIDUAL_ID].notna()]

    tied = candidates[INDIVIDUAL_ID].duplicated(keep=False)
    if tied.any():
        ids = sorted(str(i) for i in candidates.loc[tied, INDIVIDUAL_ID].unique())
        shown = ", ".join(ids[:5]) + (" ..." if len(ids) > 5 else "")
        msg = (
            f"{len(ids)} individual(s) have divergent metadata rows at their "
            f"latest {EDITED_DATE}: {shown}"
        )
        if policy is TiePolicy.ERROR:
            raise DataQualityError(msg)
        warnings.warn(f"{msg}; keeping the first row", DataQualityWarning, stacklevel=2)

    return candidates.drop_duplicates(subset=[INDIVIDUAL_ID], keep="first").reset_index(
        drop=True
    )


def prepare_status(
    status: pd.DataFrame,
    individuals: pd.DataFrame,
    keys: Iterable[str] = (INDIVIDUAL_ID,),
    redundant: Iterable[str] = STATUS_REDUNDANT_COLUMNS,
    suffix: str = STATUS_SUFFIX,
) -> pd.DataFrame:
    """Make the status table safe to merge with the individual table.

    Columns that merely duplicate individual metadata (taxon, species name)
    are dropped. Every other column sharing a name with the individual table,
    apart from the join keys and the observation date, gets ``suffix``
    appended, e.g. ``editedDate`` -> ``editedDateStat``, ``siteID`` ->
    ``siteIDStat``.
    """
    keep = set(keys)
    keep.add(DATE)

    out = status.drop(
        columns=[c for c in redundant if c in status.columns and c in individuals.columns]
    )
    renames = {
        c: f"{c}{suffix}" for c in out.columns if c in individuals.columns and c not in keep
    }
    return out.rename(columns=renames)


def drop_empty_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Drop every column that is missing in all rows.

    Which columns go depends on the data snapshot; nothing is hard-coded.
    An empty frame is returned unchanged since every column would qualify.
    """
    if df.empty:
        return df.copy()
    empty = df.columns[df.isna().all()]
    return df.drop(columns=empty)


def join_tables(
    status: pd.DataFrame,
    individuals: pd.DataFrame,
    on_tie: TiePolicy = TiePolicy.ERROR,
    id_column: str = UID,
    drop_empty: bool = True,
) -> pd.DataFrame:
    """Left-join status observations with each individual's latest metadata.

    Args:
        status: Raw ``phe_statusintensity`` rows.
        individuals: Raw ``phe_perindividual`` rows.
        on_tie: Policy for divergent metadata rows (see ``latest_individuals``).
        id_column: Unique row-id column removed from both tables.
        drop_empty: Drop columns missing in every joined row. The pipeline
            passes False so the columns later stages read are always present.

    Returns:
        One row per cleaned status row, matched on ``individualID`` alone.
        Individual-only columns carry through unchanged (NaN where the
        individual has no metadata); shared status columns such as
        ``siteID`` come through as ``siteIDStat``.

    Raises:
        SchemaError: If ``individualID`` is absent from either table.
        DataQualityError: See ``latest_individuals``.
    """
    require_columns(status, (INDIVIDUAL_ID,), "status")
    require_columns(individuals, (INDIVIDUAL_ID,), "individual")

    status_clean = clean_table(status, id_column)
    latest = latest_individuals(clean_table(individuals, id_column), on_tie=on_tie)

    status_ready = prepare_status(status_clean, latest)
    if DATE in latest.columns and DATE in status_ready.columns:
        latest = latest.rename(columns={DATE: f"{DATE}{INDIVIDUAL_SUFFIX}"})

    joined = status_ready.merge(latest, how="left", on=INDIVIDUAL_ID, validate="many_to_one")
    return drop_empty_columns(joined) if drop_empty else joined
