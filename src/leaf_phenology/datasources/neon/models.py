"""Column names and table constants for NEON plant phenology data.

NEON product DP1.10055.001 ships two tables per site:

  - ``phe_statusintensity``: one row per (individual, date, phenophase)
  - ``phe_perindividual``: one row per (individual, edited date) tagging record

Only the columns the analysis touches are named here. Everything else (site
metadata, QA flags, observer names) is passed through untouched.
"""

from __future__ import annotations

# Shared
UID = "uid"
INDIVIDUAL_ID = "individualID"
DATE = "date"
EDITED_DATE = "editedDate"

# Status/intensity table
PHENOPHASE_NAME = "phenophaseName"
PHENOPHASE_INTENSITY = "phenophaseIntensity"

# Per-individual table
TAXON_ID = "taxonID"
SCIENTIFIC_NAME = "scientificName"
GROWTH_FORM = "growthForm"

# Derived columns
INTENSITY_MIDPOINT = "intensityMidpoint"
DAY_OFFSET = "dayOffset"
N_INDIVIDUALS = "nIndividuals"

# Status columns that duplicate per-individual metadata and are dropped before joining
STATUS_REDUNDANT_COLUMNS: tuple[str, ...] = (TAXON_ID, SCIENTIFIC_NAME)

# Suffixes keeping the two origins apart after the merge
STATUS_SUFFIX = "Stat"
INDIVIDUAL_SUFFIX = "Ind"

REQUIRED_STATUS_COLUMNS: tuple[str, ...] = (
    INDIVIDUAL_ID,
    DATE,
    PHENOPHASE_NAME,
    PHENOPHASE_INTENSITY,
)
REQUIRED_INDIVIDUAL_COLUMNS: tuple[str, ...] = (
    INDIVIDUAL_ID,
    EDITED_DATE,
    SCIENTIFIC_NAME,
    GROWTH_FORM,
)

LEAVES = "Leaves"
