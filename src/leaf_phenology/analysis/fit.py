"""Grid-search fit of an annual sinusoid to leaf-intensity time series.

Model (only the phase ``b`` is free)::

    intensity(t) = A * sin(2 * pi / P * t + b) + C

with A = 0.5, C = 0.5 (intensity lives in [0, 1]) and P = 365 days. For each
candidate ``b`` on an ascending grid the sum of squared residuals over the
group's observations is computed; the first candidate reaching the minimum
wins. Every group is fitted independently.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np
import pandas as pd

from leaf_phenology.datasources.neon.models import DAY_OFFSET, INTENSITY_MIDPOINT
from leaf_phenology.datasources.neon.tables import require_columns
from leaf_phenology.schemas import FitStatus, FitSummary

if TYPE_CHECKING:
    from numpy.typing import ArrayLike


@dataclass(frozen=True)
class SinusoidModel:
    """Fixed-amplitude, fixed-period sinusoid with a free phase."""

    amplitude: float = 0.5
    period: float = 365.0
    offset: float = 0.5

    def predict(self, t: ArrayLike, phase: ArrayLike) -> np.ndarray:
        """Evaluate the model; ``t`` and ``phase`` broadcast against each other."""
        t = np.asarray(t, dtype=np.float64)
        return self.amplitude * np.sin(2 * np.pi / self.period * t + phase) + self.offset


@dataclass(frozen=True)
class PhaseFit:
    """Best phase for one group, plus the residual curve it was chosen from."""

    group: str
    status: FitStatus
    phase: float | None
    rss: float | None
    n_obs: int
    grid: np.ndarray = field(repr=False)
    curve: np.ndarray = field(repr=False)

    @property
    def ok(self) -> bool:
        return self.status is FitStatus.OK

    def summary(self) -> FitSummary:
        """Serializable view without the grid and curve arrays."""
        return FitSummary(
            group=self.group,
            status=self.status,
            phase=self.phase,
            rss=self.rss,
            n_obs=self.n_obs,
        )


def phase_grid(start: float, stop: float, step: float) -> np.ndarray:
    """Ascending candidates ``start, start + step, ...`` up to and including ``stop``.

    ``stop`` is included when it lies on the step lattice (within float
    error). Values are rounded to 10 decimals so e.g. 0.05 * 6 is exactly 0.3.

    Raises:
        ValueError: If ``step <= 0`` or ``stop < start``.
    """
    if step <= 0:
        msg = f"Grid step must be positive, got {step}"
        raise ValueError(msg)
    if stop < start:
        msg = f"Grid stop ({stop}) is below start ({start})"
        raise ValueError(msg)
    n = int(np.floor((stop - start) / step + 1e-9)) + 1
    return np.round(start + step * np.arange(n), 10)


def residual_curve(
    t: ArrayLike,
    y: ArrayLike,
    grid: ArrayLike,
    model: SinusoidModel | None = None,
) -> np.ndarray:
    """Sum of squared residuals for every candidate phase in ``grid``."""
    model = model or SinusoidModel()
    t = np.asarray(t, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)
    grid = np.asarray(grid, dtype=np.float64)

    # (n_candidates, n_obs)
    predicted = model.predict(t[np.newaxis, :], grid[:, np.newaxis])
    residuals: np.ndarray = ((predicted - y[np.newaxis, :]) ** 2).sum(axis=1)
    return residuals


def fit_phase(
    t: ArrayLike,
    y: ArrayLike,
    grid: ArrayLike,
    model: SinusoidModel | None = None,
    group: str = "",
) -> PhaseFit:
    """Pick the candidate phase minimizing the residual sum of squares.

    Pairs where either ``t`` or ``y`` is NaN are dropped first. Ties go to the
    smallest candidate.

    Args:
        t: Day offsets.
        y: Intensity values in [0, 1].
        grid: Ascending candidate phases (radians).
        model: Model with fixed amplitude/period/offset.
        group: Group key recorded on the result.

    Returns:
        PhaseFit with ``status=ok``, or ``status=no_data`` (phase and rss
        None, curve all NaN) when no valid observation remains.

    Raises:
        ValueError: If ``t`` and ``y`` differ in length or the grid is empty.
    """
    model = model or SinusoidModel()
    t = np.asarray(t, dtype=np.float64).ravel()
    y = np.asarray(y, dtype=np.float64).ravel()
    grid = np.asarray(grid, dtype=np.float64).ravel()
    if t.shape != y.shape:
        msg = f"Got {t.size} time values but {y.size} intensity values"
        raise ValueError(msg)
    if grid.size == 0:
        msg = "Candidate phase grid is empty"
        raise ValueError(msg)

    valid = ~(np.isnan(t) | np.isnan(y))
    t, y = t[valid], y[valid]
    if t.size == 0:
        return PhaseFit(
            group=group,
            status=FitStatus.NO_DATA,
            phase=None,
            rss=None,
            n_obs=0,
            grid=grid,
            curve=np.full(grid.shape, np.nan),
        )

    curve = residual_curve(t, y, grid, model)
    best = int(np.argmin(curve))  # first minimum
    return PhaseFit(
        group=group,
        status=FitStatus.OK,
        phase=float(grid[best]),
        rss=float(curve[best]),
        n_obs=int(t.size),
        grid=grid,
        curve=curve,
    )


def fit_groups(
    df: pd.DataFrame,
    group_column: str,
    grid: ArrayLike,
    model: SinusoidModel | None = None,
    time_column: str = DAY_OFFSET,
    value_column: str = INTENSITY_MIDPOINT,
) -> dict[str, PhaseFit]:
    """Fit one phase per value of ``group_column``.

    A group with no usable observations yields a ``no_data`` result; it
    never stops the other groups from being fitted.

    Returns:
        Dict mapping group key (as str) -> PhaseFit, in sorted key order.
    """
    require_columns(df, [group_column, time_column, value_column], "input")
    fits: dict[str, PhaseFit] = {}
    for key, frame in df.groupby(group_column, sort=True):
        t = pd.to_numeric(frame[time_column]).to_numpy(dtype=np.float64, na_value=np.nan)
        y = pd.to_numeric(frame[value_column]).to_numpy(dtype=np.float64, na_value=np.nan)
        fits[str(key)] = fit_phase(t, y, grid, model, group=str(key))
    return fits


def fits_to_frame(fits: dict[str, PhaseFit]) -> pd.DataFrame:
    """One row per group: group, status, phase, rss, n_obs."""
    columns = list(FitSummary.model_fields)
    rows = [fit.summary().model_dump(mode="json") for fit in fits.values()]
    return pd.DataFrame(rows, columns=columns)


def curves_to_frame(fits: dict[str, PhaseFit]) -> pd.DataFrame:
    """Long-format residual curves: one row per (group, candidate phase)."""
    frames = [
        pd.DataFrame({"group": fit.group, "phase": fit.grid, "rss": fit.curve})
        for fit in fits.values()
    ]
    if not frames:
        return pd.DataFrame(columns=["group", "phase", "rss"])
    return pd.concat(frames, ignore_index=True)
