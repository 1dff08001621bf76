"""
Tests for the analyze flow and its tasks.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pandas as pd
import pytest

from leaf_phenology.analysis import analyze
from leaf_phenology.errors import SchemaError
from leaf_phenology.flows import analyze as analyze_flow
from leaf_phenology.schemas import AnalysisOptions, PhaseGrid
from leaf_phenology.store import DataStore

if TYPE_CHECKING:
    from pathlib import Path

STATUS_ROWS = [
    ("NEON.1", "2017-01-01", "< 5%"),
    ("NEON.1", "2017-05-01", "75-94%"),
    ("NEON.1", "2017-07-01", ">= 95%"),
    ("NEON.1", "2017-10-27", "25-49%"),
    ("NEON.2", "2017-01-11", "< 5%"),
    ("NEON.2", "2017-05-01", "50-74%"),
    ("NEON.2", "2017-07-01", ">= 95%"),
]

OPTIONS = AnalysisOptions(grid=PhaseGrid(start=0.0, stop=1.0, step=0.05))


def write_inputs(base: Path) -> tuple[Path, Path]:
    """Write a small status/individual CSV pair under ``base``."""
    status = pd.DataFrame(
        {
            "uid": [f"s{i}" for i in range(len(STATUS_ROWS))],
            "siteID": "HARV",
            "individualID": [r[0] for r in STATUS_ROWS],
            "date": [r[1] for r in STATUS_ROWS],
            "editedDate": "2018-01-01",
            "phenophaseName": "Leaves",
            "phenophaseIntensity": [r[2] for r in STATUS_ROWS],
        }
    )
    individuals = pd.DataFrame(
        {
            "uid": ["i1", "i2"],
            "siteID": "HARV",
            "individualID": ["NEON.1", "NEON.2"],
            "editedDate": ["2016-05-02", "2016-05-02"],
            "scientificName": ["Acer rubrum", "Acer rubrum"],
            "growthForm": ["Deciduous broadleaf", "Deciduous broadleaf"],
        }
    )
    status_csv = base / "phe_statusintensity.csv"
    individual_csv = base / "phe_perindividual.csv"
    status.to_csv(status_csv, index=False)
    individuals.to_csv(individual_csv, index=False)
    return status_csv, individual_csv


class TestLoadTasks:
    """Test CSV loading tasks."""

    def test_load_status(self, tmp_path: Path) -> None:
        status_csv, _ = write_inputs(tmp_path)
        df = analyze_flow.load_status(status_csv)
        assert len(df) == len(STATUS_ROWS)

    def test_load_individuals(self, tmp_path: Path) -> None:
        _, individual_csv = write_inputs(tmp_path)
        df = analyze_flow.load_individuals(individual_csv)
        assert df["individualID"].tolist() == ["NEON.1", "NEON.2"]

    def test_load_status_schema_error(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.csv"
        path.write_text("uid,date\nx,2017-01-01\n")
        with pytest.raises(SchemaError):
            analyze_flow.load_status(path)


class TestSaveTasks:
    """Test writing results to the store."""

    def _result(self, tmp_path: Path) -> analyze_flow.PhenologyAnalysis:
        status_csv, individual_csv = write_inputs(tmp_path)
        status = pd.read_csv(status_csv, dtype=str)
        individuals = pd.read_csv(individual_csv, dtype=str)
        return analyze(status, individuals, OPTIONS)

    def test_save_fits(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Fit summaries are written with grid and model metadata."""
        ds = DataStore(tmp_path / "store")
        monkeypatch.setattr(analyze_flow, "store", ds)

        paths = analyze_flow.save_fits(self._result(tmp_path), OPTIONS)
        assert [p.name for p in paths] == ["individual_fits.json", "species_fits.json"]

        envelope = json.loads(paths[1].read_text())
        assert envelope["meta"]["source"] == "leaf-phenology"
        assert envelope["meta"]["grid"] == {"start": 0.0, "stop": 1.0, "step": 0.05}
        assert envelope["meta"]["model"]["period_days"] == 365.0
        assert envelope["meta"]["date_reference"] == "global"
        assert envelope["meta"]["reference_date"] == "2017-01-01"
        assert envelope["data"][0]["group"] == "Acer rubrum"
        assert envelope["data"][0]["status"] == "ok"

    def test_save_fits_explicit_target(self, tmp_path: Path) -> None:
        """An explicit target store overrides the module-level one."""
        ds = DataStore(tmp_path / "other")
        paths = analyze_flow.save_fits(self._result(tmp_path), OPTIONS, ds)
        assert all(p.is_relative_to(tmp_path / "other") for p in paths)

    def test_save_tables(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Joined table, species series and residual curves are written as CSV."""
        ds = DataStore(tmp_path / "store")
        monkeypatch.setattr(analyze_flow, "store", ds)

        paths = analyze_flow.save_tables(self._result(tmp_path))
        assert [p.name for p in paths] == [
            "joined.csv",
            "species_series.csv",
            "residual_curves.csv",
        ]

        curves = ds.read_table(analyze_flow.CURVES_PATH)
        assert curves is not None
        # 2 individuals + 1 species, 21 candidates each
        assert len(curves) == 3 * 21
        joined = ds.read_table(analyze_flow.JOINED_PATH)
        assert joined is not None
        assert len(joined) == len(STATUS_ROWS)


class TestAnalyzeAll:
    """Test the full flow."""

    def test_analyze_all(self, tmp_path: Path) -> None:
        """The flow loads, analyzes, and writes every output."""
        status_csv, individual_csv = write_inputs(tmp_path)
        out_dir = tmp_path / "out"

        result = analyze_flow.analyze_all(
            status_csv=status_csv,
            individual_csv=individual_csv,
            options=OPTIONS,
            data_dir=out_dir,
        )

        assert result["joined_rows"] == len(STATUS_ROWS)
        assert result["records"] == len(STATUS_ROWS)
        assert [f["group"] for f in result["individuals"]] == ["NEON.1", "NEON.2"]
        assert [f["group"] for f in result["species"]] == ["Acer rubrum"]
        assert result["species"][0]["status"] == "ok"
        assert len(result["outputs"]) == 5
        assert (out_dir / "derived" / "fits" / "species_fits.json").exists()
        assert (out_dir / "derived" / "tables" / "residual_curves.csv.meta.json").exists()

    def test_analyze_all_missing_input(self, tmp_path: Path) -> None:
        """A missing input file propagates out of the flow."""
        _, individual_csv = write_inputs(tmp_path)
        with pytest.raises(FileNotFoundError):
            analyze_flow.analyze_all(
                status_csv=tmp_path / "missing.csv",
                individual_csv=individual_csv,
                options=OPTIONS,
                data_dir=tmp_path / "out",
            )
