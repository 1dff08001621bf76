"""
Domain models for leaf phenology analysis.

Pydantic models for run options and serialized outputs. Tables themselves are
pandas DataFrames; these models describe how they are processed.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Self

from pydantic import BaseModel, Field, model_validator

# =============================================================================
# Enumerations
# =============================================================================


class FitStatus(StrEnum):
    """Outcome of a single-group phase fit."""

    OK = "ok"
    NO_DATA = "no_data"


class DateReference(StrEnum):
    """Which earliest date day offsets are measured from."""

    GLOBAL = "global"  # earliest date in the whole selected dataset
    GROUP = "group"  # earliest date within each fitted group


class TiePolicy(StrEnum):
    """How to resolve divergent metadata rows sharing the latest edited date."""

    ERROR = "error"
    FIRST = "first"


class IntensityBin(StrEnum):
    """NEON percentage-range categories for the "Leaves" phenophase."""

    LT_5 = "< 5%"
    P5_24 = "5-24%"
    P25_49 = "25-49%"
    P50_74 = "50-74%"
    P75_94 = "75-94%"
    GTE_95 = ">= 95%"


# =============================================================================
# Options
# =============================================================================


class PhaseGrid(BaseModel):
    """Candidate phase values (radians): ``start, start+step, ..., stop``."""

    start: float = 0.0
    stop: float = 1.1
    step: float = Field(default=0.01, gt=0)

    @model_validator(mode="after")
    def _check_bounds(self) -> Self:
        if self.stop < self.start:
            msg = f"Phase grid stop ({self.stop}) is below start ({self.start})"
            raise ValueError(msg)
        return self


class AnalysisOptions(BaseModel):
    """Everything ``analysis.pipeline.analyze`` needs beyond the two tables."""

    model_config = {"frozen": True}

    phenophase: str = Field(default="Leaves", description="Phenophase to fit")
    growth_form: str | None = Field(default=None, description="Optional growthForm filter")
    grid: PhaseGrid = Field(default_factory=PhaseGrid)
    period_days: float = Field(default=365.0, gt=0)
    amplitude: float = 0.5
    offset: float = 0.5
    date_reference: DateReference = DateReference.GLOBAL
    on_tie: TiePolicy = TiePolicy.ERROR


# =============================================================================
# Results
# =============================================================================


class FitSummary(BaseModel):
    """Serializable summary of one group's fit (no residual curve)."""

    group: str
    status: FitStatus
    phase: float | None = None
    rss: float | None = None
    n_obs: int = 0

