"""Core (UI-agnostic) metro projects dashboard logic.

This package contains:
- data loading (embedded list / JSON file / HTTP JSON -> ProjectRecord)
- filter normalization and record filtering
- KPI summaries and the overview payload (JSON-serializable)
- chart helpers (Altair -> Vega-Lite spec dict)
- the dashboard controller and poller
"""
