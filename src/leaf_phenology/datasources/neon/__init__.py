"""NEON plant phenology observations (DP1.10055.001).

Public API:
  - models: column-name constants and required-column sets
  - tables: read_status_table, read_individual_table, require_columns
"""

from leaf_phenology.datasources.neon.models import (
    DATE,
    DAY_OFFSET,
    EDITED_DATE,
    GROWTH_FORM,
    INDIVIDUAL_ID,
    INTENSITY_MIDPOINT,
    LEAVES,
    N_INDIVIDUALS,
    PHENOPHASE_INTENSITY,
    PHENOPHASE_NAME,
    REQUIRED_INDIVIDUAL_COLUMNS,
    REQUIRED_STATUS_COLUMNS,
    SCIENTIFIC_NAME,
    UID,
)
from leaf_phenology.datasources.neon.tables import (
    read_individual_table,
    read_status_table,
    require_columns,
)

__all__ = [
    "DATE",
    "DAY_OFFSET",
    "EDITED_DATE",
    "GROWTH_FORM",
    "INDIVIDUAL_ID",
    "INTENSITY_MIDPOINT",
    "LEAVES",
    "N_INDIVIDUALS",
    "PHENOPHASE_INTENSITY",
    "PHENOPHASE_NAME",
    "REQUIRED_INDIVIDUAL_COLUMNS",
    "REQUIRED_STATUS_COLUMNS",
    "SCIENTIFIC_NAME",
    "UID",
    "read_individual_table",
    "read_status_table",
    "require_columns",
]
