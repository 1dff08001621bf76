"""Exception types raised while cleaning, joining, and fitting phenology tables.

  - SchemaError: an input table lacks a join key or required column. Fatal.
  - DataQualityError: the data is well-formed but inconsistent (divergent
    "most recent" metadata rows, duplicate species/date pairs after
    aggregation, unparseable dates). Aborts the pipeline.
  - DataQualityWarning: an inconsistency was resolved by an explicit
    caller-chosen policy rather than raised.

Missing intensity bins and empty fit groups are *not* errors; they surface as
NaN midpoints and ``FitStatus.NO_DATA`` results respectively.
"""

from __future__ import annotations


class PhenologyError(Exception):
    """Base class for all leaf-phenology errors."""


class SchemaError(PhenologyError, KeyError):
    """A required column is absent from an input table."""

    def __str__(self) -> str:
        # KeyError quotes its message; keep it readable
        return str(self.args[0]) if self.args else ""


class DataQualityError(PhenologyError, ValueError):
    """Input data is internally inconsistent."""


class DataQualityWarning(UserWarning):
    """A data-quality issue was resolved by policy instead of raising."""
