"""Map categorical leaf-intensity bins to numeric midpoints.

NEON records "Leaves" intensity as one of six percentage ranges. Each range is
represented by a fixed point estimate so the series can be fitted with a
sinusoid bounded to [0, 1]:

    < 5%     0.05 / 2            = 0.025
    5-24%    (0.05 + 0.24) / 2   = 0.145
    25-49%   (0.20 + 0.49) / 2   = 0.345
    50-74%   (0.50 + 0.74) / 2   = 0.62
    75-94%   (0.85 + 0.94) / 2   = 0.895
    >= 95%   (1 + 0.95) / 2      = 0.975

Note the 25-49% and 75-94% estimates use 0.20 and 0.85 as lower bounds, so
they are not the arithmetic bin centres.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Any

from leaf_phenology.datasources.neon.models import INTENSITY_MIDPOINT, PHENOPHASE_INTENSITY
from leaf_phenology.datasources.neon.tables import require_columns
from leaf_phenology.schemas import IntensityBin

if TYPE_CHECKING:
    import pandas as pd

INTENSITY_MIDPOINTS: dict[str, float] = {
    IntensityBin.LT_5.value: 0.025,
    IntensityBin.P5_24.value: 0.145,
    IntensityBin.P25_49.value: 0.345,
    IntensityBin.P50_74.value: 0.62,
    IntensityBin.P75_94.value: 0.895,
    IntensityBin.GTE_95.value: 0.975,
}


def intensity_midpoint(label: Any) -> float:
    """Midpoint for a bin label; NaN for anything unrecognized or missing."""
    if not isinstance(label, str):
        return math.nan
    return INTENSITY_MIDPOINTS.get(label, math.nan)


def add_midpoints(
    df: pd.DataFrame,
    column: str = PHENOPHASE_INTENSITY,
    out: str = INTENSITY_MIDPOINT,
) -> pd.DataFrame:
    """Return a copy of ``df`` with a float midpoint column derived from ``column``.

    Rows whose bin is unrecognized keep a NaN midpoint; they are dropped only
    when fitting.
    """
    require_columns(df, [column], "input")
    return df.assign(**{out: df[column].map(intensity_midpoint).astype("float64")})
