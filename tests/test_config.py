"""Tests for environment-driven settings."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from leaf_phenology.config import Settings, get_settings
from leaf_phenology.schemas import AnalysisOptions, DateReference, TiePolicy


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run each test away from any local .env file."""
    monkeypatch.chdir(tmp_path)


class TestSettings:
    """Test Settings defaults and overrides."""

    def test_defaults(self) -> None:
        settings = Settings()
        assert settings.app_name == "leaf-phenology"
        assert settings.phenophase == "Leaves"
        assert settings.data_dir == Path("data")
        assert settings.date_reference is DateReference.GLOBAL
        assert settings.on_tie is TiePolicy.ERROR

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """LEAF_PHENOLOGY_ prefixed variables override defaults."""
        monkeypatch.setenv("LEAF_PHENOLOGY_PHASE_STEP", "0.05")
        monkeypatch.setenv("LEAF_PHENOLOGY_DATE_REFERENCE", "group")
        monkeypatch.setenv("LEAF_PHENOLOGY_ON_TIE", "first")
        monkeypatch.setenv("LEAF_PHENOLOGY_GROWTH_FORM", "Deciduous broadleaf")

        settings = Settings()
        assert settings.phase_step == 0.05
        assert settings.date_reference is DateReference.GROUP
        assert settings.on_tie is TiePolicy.FIRST
        assert settings.growth_form == "Deciduous broadleaf"

    def test_dotenv_file(self, tmp_path: Path) -> None:
        """Settings are also read from a .env file in the working directory."""
        (tmp_path / ".env").write_text("LEAF_PHENOLOGY_PERIOD_DAYS=366\n")
        assert Settings().period_days == 366.0

    def test_invalid_enum(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LEAF_PHENOLOGY_ON_TIE", "last")
        with pytest.raises(ValidationError):
            Settings()

    def test_get_settings_cached(self) -> None:
        """get_settings returns the same instance on repeated calls."""
        get_settings.cache_clear()
        try:
            assert get_settings() is get_settings()
        finally:
            get_settings.cache_clear()


class TestAnalysisOptions:
    """Test Settings.analysis_options."""

    def test_builds_options(self) -> None:
        settings = Settings(phase_start=0.1, phase_stop=0.9, phase_step=0.1, amplitude=0.45)
        options = settings.analysis_options()

        assert isinstance(options, AnalysisOptions)
        assert options.grid.start == 0.1
        assert options.grid.stop == 0.9
        assert options.grid.step == 0.1
        assert options.amplitude == 0.45
        assert options.period_days == 365.0

    def test_defaults_match_options_defaults(self) -> None:
        """Settings defaults produce the same options as AnalysisOptions()."""
        assert Settings().analysis_options() == AnalysisOptions()

    def test_invalid_grid_step(self) -> None:
        with pytest.raises(ValidationError):
            Settings(phase_step=0).analysis_options()

    def test_invalid_grid_bounds(self) -> None:
        with pytest.raises(ValidationError, match="below start"):
            Settings(phase_start=1.0, phase_stop=0.5).analysis_options()

    def test_options_frozen(self) -> None:
        options = AnalysisOptions()
        with pytest.raises(ValidationError):
            options.phenophase = "Open flowers"  # type: ignore[misc]
