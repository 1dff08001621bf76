"""
Application settings loaded from the environment.

Every field can be overridden with an ``LEAF_PHENOLOGY_`` prefixed environment
variable (or a ``.env`` file), e.g. ``LEAF_PHENOLOGY_PHASE_STEP=0.015``.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from leaf_phenology.schemas import AnalysisOptions, DateReference, PhaseGrid, TiePolicy


class Settings(BaseSettings):
    """Runtime configuration for the CLI and flows."""

    model_config = SettingsConfigDict(
        env_prefix="LEAF_PHENOLOGY_",
        env_file=".env",
        extra="ignore",
    )

    app_name: str = "leaf-phenology"
    app_env: str = "development"
    debug: bool = False

    # Inputs and outputs
    data_dir: Path = Path("data")
    status_csv: Path = Path("data/raw/phe_statusintensity.csv")
    individual_csv: Path = Path("data/raw/phe_perindividual.csv")

    # Record selection
    phenophase: str = "Leaves"
    growth_form: str | None = None

    # Model and grid
    phase_start: float = 0.0
    phase_stop: float = 1.1
    phase_step: float = 0.01
    period_days: float = 365.0
    amplitude: float = 0.5
    offset: float = 0.5

    date_reference: DateReference = DateReference.GLOBAL
    on_tie: TiePolicy = TiePolicy.ERROR

    def analysis_options(self) -> AnalysisOptions:
        """Build validated analysis options from these settings."""
        return AnalysisOptions(
            phenophase=self.phenophase,
            growth_form=self.growth_form,
            grid=PhaseGrid(start=self.phase_start, stop=self.phase_stop, step=self.phase_step),
            period_days=self.period_days,
            amplitude=self.amplitude,
            offset=self.offset,
            date_reference=self.date_reference,
            on_tie=self.on_tie,
        )


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
