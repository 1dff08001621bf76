"""
Prefect flow for fitting leaf phenology phases from NEON exports.

Reads the status/intensity and per-individual CSVs, runs the analysis and
writes fit results and tables to the store's ``derived/`` tier.

Run locally:
    python -m leaf_phenology.flows.analyze
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

from prefect import flow, task

from leaf_phenology.analysis.fit import curves_to_frame, fits_to_frame
from leaf_phenology.analysis.pipeline import PhenologyAnalysis, analyze
from leaf_phenology.config import get_settings
from leaf_phenology.datasources.neon import read_individual_table, read_status_table
from leaf_phenology.schemas import AnalysisOptions  # noqa: TC001
from leaf_phenology.store import DataStore

if TYPE_CHECKING:
    import pandas as pd

    from leaf_phenology.analysis.fit import PhaseFit

# Store and output paths
store = DataStore(Path("data"))
SOURCE = "leaf-phenology"

INDIVIDUAL_FITS_PATH = Path("derived/fits/individual_fits.json")
SPECIES_FITS_PATH = Path("derived/fits/species_fits.json")
JOINED_PATH = Path("derived/tables/joined.csv")
SPECIES_SERIES_PATH = Path("derived/tables/species_series.csv")
CURVES_PATH = Path("derived/tables/residual_curves.csv")


# =============================================================================
# Loading tasks
# =============================================================================


@task(name="load-status")
def load_status(path: Path) -> pd.DataFrame:
    """Load the status/intensity table."""
    return read_status_table(path)


@task(name="load-individuals")
def load_individuals(path: Path) -> pd.DataFrame:
    """Load the per-individual metadata table."""
    return read_individual_table(path)


# =============================================================================
# Analysis and output tasks
# =============================================================================


@task(name="run-analysis")
def run_analysis(
    status: pd.DataFrame,
    individuals: pd.DataFrame,
    options: AnalysisOptions,
) -> PhenologyAnalysis:
    """Join, derive intensities, and fit phases per individual and species."""
    return analyze(status, individuals, options)


def _fits_payload(fits: dict[str, PhaseFit]) -> list[dict[str, Any]]:
    return [fit.summary().model_dump(mode="json") for fit in fits.values()]


@task(name="save-fits")
def save_fits(
    result: PhenologyAnalysis,
    options: AnalysisOptions,
    target: DataStore | None = None,
) -> list[Path]:
    """Write per-individual and per-species fit summaries as JSON."""
    params = {
        "grid": options.grid.model_dump(),
        "model": {
            "amplitude": options.amplitude,
            "period_days": options.period_days,
            "offset": options.offset,
        },
        "date_reference": options.date_reference.value,
        "reference_date": (
            result.reference_date.date().isoformat() if result.reference_date is not None else None
        ),
    }
    target = target or store
    return [
        target.write(
            INDIVIDUAL_FITS_PATH, _fits_payload(result.individual_fits), source=SOURCE, **params
        ),
        target.write(
            SPECIES_FITS_PATH, _fits_payload(result.species_fits), source=SOURCE, **params
        ),
    ]


@task(name="save-tables")
def save_tables(result: PhenologyAnalysis, target: DataStore | None = None) -> list[Path]:
    """Write the joined table, species series and residual curves as CSV."""
    target = target or store
    curves = curves_to_frame({**result.individual_fits, **result.species_fits})
    return [
        target.write_table(JOINED_PATH, result.joined, source=SOURCE),
        target.write_table(SPECIES_SERIES_PATH, result.species_series, source=SOURCE),
        target.write_table(CURVES_PATH, curves, source=SOURCE),
    ]


# =============================================================================
# Main flow
# =============================================================================


def _report(label: str, fits: dict[str, PhaseFit]) -> None:
    summary = fits_to_frame(fits)
    fitted = summary[summary["status"] == "ok"]
    print(f"Fitted {len(fitted)} of {len(summary)} {label}.")
    missing = summary.loc[summary["status"] != "ok", "group"].tolist()
    if missing:
        print(f"Warning: no usable observations for {label}: {', '.join(missing)}")


@flow(name="analyze-phenology", log_prints=True)
def analyze_all(
    status_csv: Path | None = None,
    individual_csv: Path | None = None,
    options: AnalysisOptions | None = None,
    data_dir: Path | None = None,
) -> dict[str, Any]:
    """
    Fit leaf phenology phases and write results to the store.

    Inputs default to the paths and options in settings. Outputs go to
    ``data_dir`` when given, otherwise to the module-level store.
    """
    settings = get_settings()
    status_csv = status_csv or settings.status_csv
    individual_csv = individual_csv or settings.individual_csv
    options = options or settings.analysis_options()
    target = DataStore(data_dir) if data_dir is not None else store

    print(f"Loading status observations from {status_csv}...")
    status = load_status(status_csv)

    print(f"Loading individual metadata from {individual_csv}...")
    individuals = load_individuals(individual_csv)

    print(f"Fitting '{options.phenophase}' phases for {len(status)} status rows...")
    result = run_analysis(status, individuals, options)
    _report("individuals", result.individual_fits)
    _report("species", result.species_fits)

    print("Writing outputs...")
    outputs = [*save_fits(result, options, target), *save_tables(result, target)]

    return {
        "joined_rows": len(result.joined),
        "records": len(result.records),
        "individuals": fits_to_frame(result.individual_fits).to_dict("records"),
        "species": fits_to_frame(result.species_fits).to_dict("records"),
        "outputs": [str(p) for p in outputs],
    }


if __name__ == "__main__":
    summary = analyze_all()
    print(f"Flow complete: {len(summary['species'])} species fitted")
