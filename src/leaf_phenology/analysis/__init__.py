"""Table cleaning, intensity derivation, and phase fitting.

This is the domain logic layer. Everything here is a pure function of
DataFrames: no file I/O, no Prefect decorators.

Modules:
  - join: clean both NEON tables, keep latest metadata, left-join
  - intensity: categorical intensity bin -> numeric midpoint
  - dates: calendar date -> integer day offset
  - aggregate: per-species mean intensity per date
  - fit: grid-search least-squares fit of the sinusoid phase
  - pipeline: ``analyze()`` composing all of the above

Adding an analysis stage
------------------------
1. Write a function that takes a DataFrame and returns a *new* DataFrame.
   Check inputs with ``require_columns`` so a missing column raises
   ``SchemaError`` instead of a bare ``KeyError``.
2. Add it to ``pipeline.analyze`` in the right order.
3. Re-export it here and add tests in ``tests/test_{name}.py``.
"""

from leaf_phenology.analysis.aggregate import aggregate_by_species, check_unique
from leaf_phenology.analysis.dates import add_day_offsets, day_offsets, earliest_date, parse_dates
from leaf_phenology.analysis.fit import (
    PhaseFit,
    SinusoidModel,
    curves_to_frame,
    fit_groups,
    fit_phase,
    fits_to_frame,
    phase_grid,
    residual_curve,
)
from leaf_phenology.analysis.intensity import INTENSITY_MIDPOINTS, add_midpoints, intensity_midpoint
from leaf_phenology.analysis.join import (
    clean_table,
    drop_empty_columns,
    join_tables,
    latest_individuals,
    prepare_status,
)
from leaf_phenology.analysis.pipeline import PhenologyAnalysis, analyze, select_records

__all__ = [
    "INTENSITY_MIDPOINTS",
    "PhaseFit",
    "PhenologyAnalysis",
    "SinusoidModel",
    "add_day_offsets",
    "add_midpoints",
    "aggregate_by_species",
    "analyze",
    "check_unique",
    "clean_table",
    "curves_to_frame",
    "day_offsets",
    "drop_empty_columns",
    "earliest_date",
    "fit_groups",
    "fit_phase",
    "fits_to_frame",
    "intensity_midpoint",
    "join_tables",
    "latest_individuals",
    "parse_dates",
    "phase_grid",
    "prepare_status",
    "residual_curve",
    "select_records",
]
