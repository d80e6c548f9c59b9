"""
Derived-metric engine: pure computations over an Index.

Overview
- value_domain(): global (all-years) min/max of a metric, for stable colour scales.
- fit_line() / trend_line(): ordinary least squares over (x, y) points.
- percentage_changes(): per-state start-to-end change over a year range.
- rank_states(): ordering by mean value or by percentage change, ties by name.
- change_summary(): mean, extremes and up/down counts of the defined changes.
- year_summary(), heatmap_cells(), scatter_points(), max_abs_change(): inputs for the
  choropleth caption, the heatmap matrix, the scatter plot, and the diverging axis.

Degenerate inputs (documented fallbacks, never NaN/Infinity)
- Empty index: value_domain -> None; year_summary -> None.
- Fewer than two points or all x identical: trend_line -> None.
- No defined change: change_summary -> None.
- start_value == 0: DerivedChange.percent_change is None and the state is excluded from
  percentage ranking; absolute_change is still reported.

Notes
- Every function recomputes from its arguments; nothing is cached beyond the Index.
- Zero-IO: stdlib + core models only.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Sequence
from typing import Any, Literal

from .errors import DegenerateComputation
from .grammar import Metric, RankBy, SortOrder, metric_value
from .index import Index
from .schema import ChangeSummary, DerivedChange, TrendLine

__all__ = [
    "value_domain",
    "fit_line",
    "trend_line",
    "percentage_changes",
    "rank_states",
    "year_summary",
    "heatmap_cells",
    "scatter_points",
    "max_abs_change",
    "change_summary",
]

logger = logging.getLogger(__name__)

Point = tuple[float, float]


# ----------------------------
# Colour domain
# ----------------------------


def value_domain(index: Index, metric: Metric) -> tuple[float, float] | None:
    """
    Min and max of a metric across every year of the index.

    The domain deliberately ignores the displayed year so a colour scale stays fixed
    while the animated map moves through time.

    Returns:
        tuple[float, float] | None: (min, max), or None for an empty index.
    """
    values = [metric_value(r, metric) for year in index.all_years for r in index.by_year[year]]
    if not values:
        return None
    return (min(values), max(values))


# ----------------------------
# Linear regression
# ----------------------------


def fit_line(points: Iterable[Point]) -> tuple[float, float]:
    """
    Ordinary least squares slope and intercept.

    slope = (n·Σxy − Σx·Σy) / (n·Σx² − (Σx)²); intercept = (Σy − slope·Σx) / n

    Args:
        points (Iterable[tuple[float, float]]): (x, y) pairs.

    Returns:
        tuple[float, float]: (slope, intercept).

    Raises:
        DegenerateComputation: Fewer than two points, a non-finite coordinate, or a zero
            denominator (all x identical: vertical regression).
    """
    pts = [(float(x), float(y)) for x, y in points]
    n = len(pts)
    if n < 2:
        raise DegenerateComputation(f"need at least 2 points for a regression (got {n})")
    if not all(math.isfinite(x) and math.isfinite(y) for x, y in pts):
        raise DegenerateComputation("regression input contains non-finite values")

    sum_x = math.fsum(x for x, _ in pts)
    sum_y = math.fsum(y for _, y in pts)
    sum_xy = math.fsum(x * y for x, y in pts)
    sum_xx = math.fsum(x * x for x, _ in pts)

    denom = n * sum_xx - sum_x * sum_x
    if denom == 0:
        raise DegenerateComputation("all x values are identical; slope is undefined")
    slope = (n * sum_xy - sum_x * sum_y) / denom
    intercept = (sum_y - slope * sum_x) / n
    return slope, intercept


def trend_line(points: Iterable[Point]) -> TrendLine | None:
    """
    Fitted line evaluated at the minimum and maximum x of the points.

    Returns:
        TrendLine | None: Endpoints plus slope/intercept, or None when no line is defined.

    Examples:
        >>> t = trend_line([(0, 0), (10, 10)])
        >>> (t.slope, t.intercept, t.x1, t.y1, t.x2, t.y2)
        (1.0, 0.0, 0.0, 0.0, 10.0, 10.0)
    """
    pts = list(points)
    try:
        slope, intercept = fit_line(pts)
    except DegenerateComputation as exc:
        logger.debug("no trend line: %s", exc)
        return None
    x_min = min(float(x) for x, _ in pts)
    x_max = max(float(x) for x, _ in pts)
    return TrendLine(
        x1=x_min,
        y1=slope * x_min + intercept,
        x2=x_max,
        y2=slope * x_max + intercept,
        slope=slope,
        intercept=intercept,
    )


# ----------------------------
# Start-to-end change
# ----------------------------


def percentage_changes(
    index: Index,
    metric: Metric,
    start_year: int | None = None,
    end_year: int | None = None,
) -> list[DerivedChange]:
    """
    Per-state change of a metric between two years.

    States lacking a record in either year are skipped (not zero-filled). Output follows
    index.all_states (lexicographic).

    Args:
        index (Index): Source index.
        metric (Metric): Field to compare.
        start_year (int | None): Defaults to the first year of the index.
        end_year (int | None): Defaults to the last year of the index.

    Returns:
        list[DerivedChange]: One entry per fully covered state.

    Raises:
        ValueError: If start_year > end_year.
    """
    if index.is_empty:
        return []
    start = index.all_years[0] if start_year is None else start_year
    end = index.all_years[-1] if end_year is None else end_year
    if start > end:
        raise ValueError(f"start_year {start} is after end_year {end}")

    out: list[DerivedChange] = []
    for state in index.all_states:
        first = index.lookup(state, start)
        last = index.lookup(state, end)
        if first is None or last is None:
            continue
        start_value = metric_value(first, metric)
        end_value = metric_value(last, metric)
        if start_value == 0:
            logger.debug("%s: start value is zero, percent change undefined", state)
            pct = None
        else:
            pct = (end_value - start_value) / start_value * 100
        out.append(
            DerivedChange(
                state=state,
                start_value=start_value,
                end_value=end_value,
                percent_change=pct,
                absolute_change=end_value - start_value,
                start_deaths=first.death_count,
                end_deaths=last.death_count,
                start_rate=first.adjusted_rate,
                end_rate=last.adjusted_rate,
            )
        )
    return out


def max_abs_change(changes: Iterable[DerivedChange]) -> float | None:
    """Largest |percent_change| among defined changes (half-width of a diverging axis)."""
    values = [abs(c.percent_change) for c in changes if c.percent_change is not None]
    return max(values) if values else None


def change_summary(changes: Iterable[DerivedChange]) -> ChangeSummary | None:
    """
    Summary line for the change view over the states with a defined percent_change.

    Returns:
        ChangeSummary | None: None when no change is defined (empty input, or every state
        started at zero).
    """
    defined = sorted(
        ((c.state, c.percent_change) for c in changes if c.percent_change is not None),
        key=lambda sc: sc[0],
    )
    if not defined:
        return None
    top = max(defined, key=lambda sc: sc[1])
    bottom = min(defined, key=lambda sc: sc[1])
    values = [pct for _, pct in defined]
    return ChangeSummary(
        count=len(values),
        mean_change=math.fsum(values) / len(values),
        max_increase=top[1],
        max_increase_state=top[0],
        max_decrease=bottom[1],
        max_decrease_state=bottom[0],
        increased=sum(1 for v in values if v > 0),
        decreased=sum(1 for v in values if v < 0),
    )


# ----------------------------
# Ranking
# ----------------------------


def _mean_value(index: Index, state: str, metric: Metric) -> float:
    recs = index.by_state.get(state, ())
    if not recs:
        return 0.0
    return math.fsum(metric_value(r, metric) for r in recs) / len(recs)


def rank_states(
    states: Iterable[str],
    index: Index,
    metric: Metric,
    *,
    by: RankBy | None = None,
    order: SortOrder = SortOrder.DESCENDING,
    changes: Sequence[DerivedChange] | None = None,
) -> list[str]:
    """
    Order state names for display.

    Args:
        states (Iterable[str]): Names to order.
        index (Index): Source index.
        metric (Metric): Field used for averages (and for changes computed on demand).
        by (RankBy | None): None for lexicographic order (ranking disabled),
            AVERAGE_VALUE for the mean across all years, CHANGE for percent_change.
        order (SortOrder): Direction of the ranking key (default descending).
        changes (Sequence[DerivedChange] | None): Precomputed changes for CHANGE; computed
            over the full year range of the index when omitted.

    Returns:
        list[str]: Ordered names. Ties are broken by name. Under CHANGE, states without a
        defined percent_change are excluded.
    """
    names = list(dict.fromkeys(states))
    if by is None:
        return sorted(names)

    if by is RankBy.AVERAGE_VALUE:
        keys = {s: _mean_value(index, s, metric) for s in names}
    else:
        if changes is None:
            changes = percentage_changes(index, metric)
        pct = {c.state: c.percent_change for c in changes if c.percent_change is not None}
        keys = {s: pct[s] for s in names if s in pct}

    sign = -1.0 if order is SortOrder.DESCENDING else 1.0
    return sorted(keys, key=lambda s: (sign * keys[s], s))


# ----------------------------
# View inputs
# ----------------------------


def year_summary(index: Index, year: int, metric: Metric) -> float | None:
    """
    Total deaths (DEATH_COUNT) or mean adjusted rate (ADJUSTED_RATE) for one year.

    Returns None when the year has no records.
    """
    recs = index.by_year.get(year, ())
    if not recs:
        return None
    total = math.fsum(metric_value(r, metric) for r in recs)
    if metric is Metric.DEATH_COUNT:
        return total
    return total / len(recs)


def heatmap_cells(
    index: Index, metric: Metric, states: Sequence[str] | None = None
) -> list[dict[str, Any]]:
    """
    Year×state matrix in long form.

    Returns one dict per (state, year) with keys state, year, value (None when the state
    has no record for that year), and row (position of the state in `states`).
    """
    rows = list(index.all_states if states is None else states)
    cells: list[dict[str, Any]] = []
    for row, state in enumerate(rows):
        for year in index.all_years:
            rec = index.lookup(state, year)
            cells.append(
                {
                    "state": state,
                    "year": year,
                    "row": row,
                    "value": None if rec is None else metric_value(rec, metric),
                }
            )
    return cells


def scatter_points(index: Index, selected_year: int | Literal["all"] = "all") -> list[Point]:
    """(death_count, adjusted_rate) pairs for one year, or for every record when "all"."""
    if selected_year == "all":
        recs: Iterable[Any] = index.records
    else:
        recs = index.by_year.get(int(selected_year), ())
    return [(float(r.death_count), float(r.adjusted_rate)) for r in recs]
