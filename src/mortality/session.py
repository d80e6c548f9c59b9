"""
ViewSession: the context one view owns.

A session holds the current Index and the view's ViewConfig and exposes the derived
results the view renders. Each view gets its own session so views never share mutable
fields; they may share the same (immutable) Index.

Reload semantics
- load() builds a brand-new Index. If reading or validation fails, the error propagates
  and the previous index stays in place (no partial index).
"""

from __future__ import annotations

import logging
from typing import Any

from mortality.core.grammar import RankBy
from mortality.core.index import Index
from mortality.core.metrics import (
    change_summary,
    heatmap_cells,
    percentage_changes,
    rank_states,
    scatter_points,
    trend_line,
    value_domain,
)
from mortality.core.schema import ChangeSummary, DerivedChange, TrendLine, ViewConfig
from mortality.io.config import Settings
from mortality.io.errors import LoadError
from mortality.io.read import Source, load_index

__all__ = ["ViewSession"]

logger = logging.getLogger(__name__)


class ViewSession:
    """
    Owned per-view context: an Index plus the view's configuration.

    Args:
        index (Index | None): Initial index (None until load()).
        config (ViewConfig | None): Initial configuration (defaults when None).
        settings (Settings | None): Year range used for start-to-end changes.

    Raises:
        IoConfigError: If settings fail Settings.validate().
    """

    def __init__(
        self,
        index: Index | None = None,
        config: ViewConfig | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._index = index
        self._config = config or ViewConfig()
        self._settings = (settings or Settings()).validate()

    @classmethod
    def from_settings(cls, settings: Settings) -> ViewSession:
        cfg = ViewConfig(metric=settings.metric_enum, tick_interval_ms=settings.tick_interval_ms)
        return cls(config=cfg, settings=settings)

    @property
    def index(self) -> Index | None:
        return self._index

    @property
    def config(self) -> ViewConfig:
        return self._config

    def require_index(self) -> Index:
        if self._index is None:
            raise LoadError("no data loaded")
        return self._index

    def load(self, source: Source | None = None) -> Index:
        """Replace the index with one built from `source` (defaults to settings.data_path)."""
        index = load_index(self._settings.data_path if source is None else source)
        self._index = index
        return index

    def use_index(self, index: Index) -> None:
        """Adopt an index loaded elsewhere (e.g., a cached shared load)."""
        self._index = index

    def configure(self, **changes: Any) -> ViewConfig:
        self._config = self._config.with_changes(**changes)
        return self._config

    # ----------------------------
    # Derived reads
    # ----------------------------

    def domain(self) -> tuple[float, float] | None:
        return value_domain(self.require_index(), self._config.metric)

    def changes(self) -> list[DerivedChange]:
        index = self.require_index()
        start, end = self.change_range()
        return percentage_changes(index, self._config.metric, start, end)

    def ranked_changes(self) -> list[DerivedChange]:
        """Changes in display order: by percent change when sorting, else by name."""
        changes = self.changes()
        if not self._config.sort_enabled:
            return sorted(changes, key=lambda c: c.state)
        order = rank_states(
            [c.state for c in changes],
            self.require_index(),
            self._config.metric,
            by=RankBy.CHANGE,
            changes=changes,
        )
        by_state = {c.state: c for c in changes}
        return [by_state[s] for s in order]

    def summary(self) -> ChangeSummary | None:
        return change_summary(self.changes())

    def ranked_states(self) -> list[str]:
        """Heatmap row order: by mean value when sorting, else alphabetical."""
        index = self.require_index()
        by = RankBy.AVERAGE_VALUE if self._config.sort_enabled else None
        return rank_states(index.all_states, index, self._config.metric, by=by)

    def heatmap(self) -> list[dict[str, Any]]:
        return heatmap_cells(self.require_index(), self._config.metric, self.ranked_states())

    def scatter(self) -> list[tuple[float, float]]:
        return scatter_points(self.require_index(), self._config.selected_year)

    def trend(self) -> TrendLine | None:
        if not self._config.show_trend_line:
            return None
        return trend_line(self.scatter())

    def change_range(self) -> tuple[int, int]:
        """Start and end year for changes: settings range, or the index range when not covered."""
        index = self.require_index()
        s = self._settings
        start, end = s.start_year, s.end_year
        if index.all_years and not (start in index.by_year and end in index.by_year):
            logger.debug(
                "configured range %d-%d not covered; using %d-%d",
                start,
                end,
                index.all_years[0],
                index.all_years[-1],
            )
            start, end = index.all_years[0], index.all_years[-1]
        return start, end
