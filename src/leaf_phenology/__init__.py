"""Leaf Phenology - seasonal leaf-cycle fitting for NEON plant observations.

Architecture::

    datasources/   NEON table schema and CSV readers
    analysis/      Pure DataFrame logic (join, intensity midpoints, day
                   offsets, species aggregation, grid-search phase fit)
    flows/         Prefect orchestration (load CSVs, analyze, write outputs)
    store.py       Output files with metadata (derived/ tier)
    config.py      Environment-driven settings

Data flow: raw CSVs -> datasources -> analysis -> store (derived/)

Extension points (see each package's docstring):
  - New data source:      datasources/__init__.py
  - New analysis stage:   analysis/__init__.py
"""

__version__ = "0.1.0"

from leaf_phenology.analysis.pipeline import PhenologyAnalysis, analyze
from leaf_phenology.config import Settings
from leaf_phenology.schemas import AnalysisOptions

__all__ = ["AnalysisOptions", "PhenologyAnalysis", "Settings", "__version__", "analyze"]
