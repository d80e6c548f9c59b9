"""
mortality.io — loading the source table and runtime settings.

## Public API
- Settings — configuration (env > TOML > defaults).
- load_index / load_records / records_from_rows — CSV to typed Records and Index.
- LoadError / IoConfigError — IO-layer errors.

## Import DAG discipline
- Depends only on stdlib, polars, and mortality.core.*.
- MUST NOT import mortality.session, mortality.playback, or app.
"""

from __future__ import annotations

from .config import Settings
from .errors import IoConfigError, IoError, LoadError
from .read import load_index, load_records, records_from_rows

__all__ = [
    "Settings",
    "IoError",
    "IoConfigError",
    "LoadError",
    "load_index",
    "load_records",
    "records_from_rows",
]
