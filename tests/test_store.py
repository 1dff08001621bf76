"""Tests for the DataStore module."""

from __future__ import annotations

import json
from pathlib import Path

import pandas as pd
import pytest

from leaf_phenology.store import DataStore


class TestDataStoreInit:
    """Test DataStore initialization."""

    def test_creates_tier_paths(self, tmp_path: Path) -> None:
        store = DataStore(tmp_path)
        assert store.base == tmp_path
        assert store.raw == tmp_path / "raw"
        assert store.derived == tmp_path / "derived"


class TestDataStoreWrite:
    """Test writing data with metadata envelopes."""

    def test_write_creates_file(self, tmp_path: Path) -> None:
        store = DataStore(tmp_path)
        path = store.write(Path("derived/fits/species_fits.json"), [{"group": "A"}], source="t")
        assert path.exists()

    def test_write_envelope_format(self, tmp_path: Path) -> None:
        store = DataStore(tmp_path)
        store.write(Path("derived/fits.json"), [{"phase": 0.3}], source="leaf-phenology")

        data = json.loads((tmp_path / "derived" / "fits.json").read_text())
        assert "meta" in data
        assert "data" in data
        assert data["meta"]["source"] == "leaf-phenology"
        assert "written_at" in data["meta"]
        assert data["data"] == [{"phase": 0.3}]

    def test_write_extra_params(self, tmp_path: Path) -> None:
        store = DataStore(tmp_path)
        store.write(
            Path("derived/test.json"),
            {},
            source="test",
            grid={"start": 0.0, "stop": 1.1, "step": 0.01},
        )
        data = json.loads((tmp_path / "derived" / "test.json").read_text())
        assert data["meta"]["grid"] == {"start": 0.0, "stop": 1.1, "step": 0.01}

    def test_write_creates_parent_dirs(self, tmp_path: Path) -> None:
        store = DataStore(tmp_path)
        store.write(Path("derived/fits/deep/nested.json"), {}, source="test")
        assert (tmp_path / "derived" / "fits" / "deep" / "nested.json").exists()

    def test_write_rejects_escaping_path(self, tmp_path: Path) -> None:
        store = DataStore(tmp_path / "store")
        with pytest.raises(ValueError, match="escapes"):
            store.write(Path("../outside.json"), {}, source="test")


class TestDataStoreRead:
    """Test reading data from the store."""

    def test_read_returns_data_payload(self, tmp_path: Path) -> None:
        store = DataStore(tmp_path)
        store.write(Path("derived/test.json"), {"key": "value"}, source="test")
        result = store.read(Path("derived/test.json"))
        assert result == {"key": "value"}

    def test_read_missing_file(self, tmp_path: Path) -> None:
        store = DataStore(tmp_path)
        assert store.read(Path("nonexistent.json")) is None

    def test_read_raw_returns_full_envelope(self, tmp_path: Path) -> None:
        store = DataStore(tmp_path)
        store.write(Path("derived/test.json"), {"key": "value"}, source="test")
        result = store.read_raw(Path("derived/test.json"))
        assert result is not None
        assert "meta" in result
        assert "data" in result
        assert result["data"] == {"key": "value"}

    def test_read_raw_missing_file(self, tmp_path: Path) -> None:
        store = DataStore(tmp_path)
        assert store.read_raw(Path("nonexistent.json")) is None

    def test_read_meta_from_envelope(self, tmp_path: Path) -> None:
        store = DataStore(tmp_path)
        store.write(Path("derived/test.json"), {}, source="test", run="a")
        meta = store.read_meta(Path("derived/test.json"))
        assert meta["source"] == "test"
        assert meta["run"] == "a"

    def test_read_meta_missing_file(self, tmp_path: Path) -> None:
        store = DataStore(tmp_path)
        assert store.read_meta(Path("derived/missing.csv")) == {}


class TestDataStoreTables:
    """Test CSV table storage with sidecar metadata."""

    def test_write_table_creates_csv_and_sidecar(self, tmp_path: Path) -> None:
        store = DataStore(tmp_path)
        frame = pd.DataFrame({"group": ["A", "B"], "phase": [0.3, 0.45]})

        result = store.write_table(Path("derived/tables/fits.csv"), frame, source="test")

        assert result.exists()
        sidecar = result.with_suffix(".csv.meta.json")
        assert sidecar.exists()
        meta = json.loads(sidecar.read_text())["meta"]
        assert meta["source"] == "test"
        assert meta["rows"] == 2
        assert meta["columns"] == ["group", "phase"]

    def test_read_table_round_trip(self, tmp_path: Path) -> None:
        store = DataStore(tmp_path)
        frame = pd.DataFrame({"group": ["A", "B"], "phase": [0.3, 0.45]})
        store.write_table(Path("derived/tables/fits.csv"), frame, source="test")

        loaded = store.read_table(Path("derived/tables/fits.csv"))
        assert loaded is not None
        pd.testing.assert_frame_equal(loaded, frame)

    def test_read_table_missing(self, tmp_path: Path) -> None:
        store = DataStore(tmp_path)
        assert store.read_table(Path("derived/tables/missing.csv")) is None

    def test_read_meta_prefers_sidecar(self, tmp_path: Path) -> None:
        store = DataStore(tmp_path)
        frame = pd.DataFrame({"x": [1]})
        store.write_table(Path("derived/t.csv"), frame, source="sidecar-source")
        assert store.read_meta(Path("derived/t.csv"))["source"] == "sidecar-source"

    def test_file_path_returns_path(self, tmp_path: Path) -> None:
        store = DataStore(tmp_path)
        store.write_table(Path("derived/t.csv"), pd.DataFrame({"x": [1]}), source="test")

        result = store.file_path(Path("derived/t.csv"))
        assert result is not None
        assert result.exists()

    def test_file_path_missing(self, tmp_path: Path) -> None:
        store = DataStore(tmp_path)
        assert store.file_path(Path("derived/missing.csv")) is None
