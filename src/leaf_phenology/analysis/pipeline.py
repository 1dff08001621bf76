"""Compose the analysis stages into one pure function.

    join_tables -> select_records -> add_midpoints -> add_day_offsets
        -> fit_groups(individualID)
        -> aggregate_by_species -> add_day_offsets -> fit_groups(scientificName)

Each stage takes a DataFrame and returns a new one; nothing is shared or
mutated between stages.
"""

from __future__ import annotations

from dataclasses import dataclass

import pandas as pd

from leaf_phenology.analysis.aggregate import aggregate_by_species
from leaf_phenology.analysis.dates import add_day_offsets, earliest_date
from leaf_phenology.analysis.fit import PhaseFit, SinusoidModel, fit_groups, phase_grid
from leaf_phenology.analysis.intensity import add_midpoints
from leaf_phenology.analysis.join import drop_empty_columns, join_tables
from leaf_phenology.datasources.neon.models import (
    DATE,
    GROWTH_FORM,
    INDIVIDUAL_ID,
    LEAVES,
    PHENOPHASE_NAME,
    SCIENTIFIC_NAME,
)
from leaf_phenology.datasources.neon.tables import require_columns
from leaf_phenology.schemas import AnalysisOptions, DateReference


@dataclass(frozen=True)
class PhenologyAnalysis:
    """Everything one analysis run produces."""

    joined: pd.DataFrame
    records: pd.DataFrame
    individual_fits: dict[str, PhaseFit]
    species_series: pd.DataFrame
    species_fits: dict[str, PhaseFit]
    reference_date: pd.Timestamp | None = None


def select_records(
    joined: pd.DataFrame,
    phenophase: str = LEAVES,
    growth_form: str | None = None,
) -> pd.DataFrame:
    """Rows for one phenophase (and optionally one growth form)."""
    require_columns(joined, [PHENOPHASE_NAME], "joined")
    mask = joined[PHENOPHASE_NAME] == phenophase
    if growth_form is not None:
        require_columns(joined, [GROWTH_FORM], "joined")
        mask &= joined[GROWTH_FORM] == growth_form
    return joined[mask].reset_index(drop=True)


def model_from_options(options: AnalysisOptions) -> SinusoidModel:
    return SinusoidModel(
        amplitude=options.amplitude,
        period=options.period_days,
        offset=options.offset,
    )


def analyze(
    status: pd.DataFrame,
    individuals: pd.DataFrame,
    options: AnalysisOptions | None = None,
) -> PhenologyAnalysis:
    """Run the whole analysis on two in-memory tables.

    Args:
        status: Raw ``phe_statusintensity`` rows.
        individuals: Raw ``phe_perindividual`` rows.
        options: Record selection, grid, model constants and policies.

    Returns:
        PhenologyAnalysis with the joined table (all-missing columns
        dropped), the selected records (with
        midpoints and day offsets), per-individual fits, the per-species
        series and per-species fits.

    Raises:
        SchemaError: A required column is missing.
        DataQualityError: Ambiguous metadata, unparseable dates, or duplicate
            species/date pairs after aggregation.
    """
    options = options or AnalysisOptions()
    model = model_from_options(options)
    grid = phase_grid(options.grid.start, options.grid.stop, options.grid.step)

    # Stages below read columns by name even when every value is missing
    full = join_tables(status, individuals, on_tie=options.on_tie, drop_empty=False)
    joined = drop_empty_columns(full)
    records = add_midpoints(select_records(full, options.phenophase, options.growth_form))

    if options.date_reference is DateReference.GLOBAL:
        reference = earliest_date(records[DATE])
        records = add_day_offsets(records, reference=reference)
    else:
        reference = None
        records = add_day_offsets(records, by=INDIVIDUAL_ID)
    individual_fits = fit_groups(records, INDIVIDUAL_ID, grid, model)

    species_series = aggregate_by_species(records)
    if options.date_reference is DateReference.GLOBAL:
        species_series = add_day_offsets(species_series, reference=reference)
    else:
        species_series = add_day_offsets(species_series, by=SCIENTIFIC_NAME)
    species_fits = fit_groups(species_series, SCIENTIFIC_NAME, grid, model)

    return PhenologyAnalysis(
        joined=joined,
        records=records,
        individual_fits=individual_fits,
        species_series=species_series,
        species_fits=species_fits,
        reference_date=reference,
    )
