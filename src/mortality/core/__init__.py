"""
Core package aggregator: records, enums, index, and derived metrics.

## Contracts (single source of truth)
- Grammar — Metric / RankBy / SortOrder enums and parsing helpers.
- Schemas — Record, DerivedChange, ChangeSummary, TrendLine, PlaybackState, ViewConfig.
- Index — build_index() over Records; read-only grouping by state and year.
- Metrics — value_domain, trend_line, percentage_changes, rank_states and view inputs.

## Notes
- Zero-IO policy: stdlib + pydantic only; no file/network IO.
- All returned structures are read-only snapshots.

## Examples
```python
from mortality.core import Metric, Record, build_index, value_domain
rows = [
    Record(year=2014, state="Ohio", death_count=100, adjusted_rate=10.0),
    Record(year=2015, state="Ohio", death_count=120, adjusted_rate=12.0),
]
value_domain(build_index(rows), Metric.DEATH_COUNT)  # (100.0, 120.0)
```
"""

from __future__ import annotations

from .errors import DataIntegrityError, DegenerateComputation
from .grammar import Metric, RankBy, SortOrder, metric_from_value, metric_label, metric_value
from .index import EMPTY_INDEX, Index, build_index
from .metrics import (
    fit_line,
    change_summary,
    heatmap_cells,
    max_abs_change,
    percentage_changes,
    rank_states,
    scatter_points,
    trend_line,
    value_domain,
    year_summary,
)
from .schema import ChangeSummary, DerivedChange, PlaybackState, Record, TrendLine, ViewConfig

__all__ = [
    "DataIntegrityError",
    "DegenerateComputation",
    "Metric",
    "RankBy",
    "SortOrder",
    "metric_from_value",
    "metric_label",
    "metric_value",
    "EMPTY_INDEX",
    "Index",
    "build_index",
    "fit_line",
    "change_summary",
    "heatmap_cells",
    "max_abs_change",
    "percentage_changes",
    "rank_states",
    "scatter_points",
    "trend_line",
    "value_domain",
    "year_summary",
    "ChangeSummary",
    "DerivedChange",
    "PlaybackState",
    "Record",
    "TrendLine",
    "ViewConfig",
]
