"""Average leaf intensity across individuals of the same species per date."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pandas as pd

from leaf_phenology.analysis.dates import parse_dates
from leaf_phenology.datasources.neon.models import (
    DATE,
    INTENSITY_MIDPOINT,
    N_INDIVIDUALS,
    SCIENTIFIC_NAME,
)
from leaf_phenology.datasources.neon.tables import require_columns
from leaf_phenology.errors import DataQualityError

if TYPE_CHECKING:
    from collections.abc import Sequence


def check_unique(df: pd.DataFrame, keys: Sequence[str]) -> None:
    """Raise DataQualityError if any combination of ``keys`` occurs twice."""
    dupes = df[df.duplicated(subset=list(keys), keep=False)]
    if not dupes.empty:
        sample = dupes[list(keys)].drop_duplicates().head(3).to_dict("records")
        msg = f"{len(dupes)} rows share a ({', '.join(keys)}) key, e.g. {sample}"
        raise DataQualityError(msg)


def aggregate_by_species(
    df: pd.DataFrame,
    species_column: str = SCIENTIFIC_NAME,
    date_column: str = DATE,
    value_column: str = INTENSITY_MIDPOINT,
) -> pd.DataFrame:
    """Mean intensity per (species, date), ignoring missing midpoints.

    Args:
        df: Joined records carrying midpoint intensities.
        species_column: Grouping column for species.
        date_column: Observation date column; values are compared as
            calendar days so differently formatted strings still match.
        value_column: Numeric column to average.

    Returns:
        One row per (species, date), sorted by species then date, with the
        mean in ``value_column`` and the number of non-missing values that
        contributed in ``nIndividuals``. Dates are returned as timestamps.
        A (species, date) whose values are all missing keeps a NaN mean and
        a count of 0.
    """
    require_columns(df, [species_column, date_column, value_column], "input")

    keyed = pd.DataFrame(
        {
            species_column: df[species_column],
            date_column: parse_dates(df[date_column], date_column).dt.normalize(),
            value_column: pd.to_numeric(df[value_column]),
        }
    )
    series = (
        keyed.groupby([species_column, date_column], sort=True)[value_column]
        .agg(["mean", "count"])
        .reset_index()
        .rename(columns={"mean": value_column, "count": N_INDIVIDUALS})
    )

    check_unique(series, [species_column, date_column])
    return series
