"""
mortality — indexing, derived metrics, and playback for the state mortality explorer.

## Packages
- core — records, enums, index, derived-metric engine (zero-IO; stdlib + pydantic).
- io — CSV loader (polars) and settings (env > TOML > defaults).
- playback — timer-driven year cursor for the animated map.
- session — per-view context owning an index and its configuration.

## Import DAG discipline
- core imports nothing above it; io and playback import core; session imports core and io.
- The Streamlit/Altair shell lives in the separate `app` package.
"""

from __future__ import annotations

__version__ = "0.1.0"
