"""
Prefect flows for the analysis pipeline.

Flows:
- analyze: Read NEON CSV exports, fit leaf phases, write derived outputs

Usage (local):
    python -m leaf_phenology.flows.analyze

Usage (Prefect):
    prefect server start  # Optional, for dashboard
    python -m leaf_phenology.flows.analyze
"""
