from __future__ import annotations

import math

import pytest

from mortality.core.errors import DegenerateComputation
from mortality.core.grammar import Metric
from mortality.core.index import build_index
from mortality.core.metrics import (
    fit_line,
    heatmap_cells,
    scatter_points,
    trend_line,
    value_domain,
    year_summary,
)
from mortality.core.schema import Record


def _rec(state: str, year: int, deaths: int, rate: float) -> Record:
    return Record(year=year, state=state, death_count=deaths, adjusted_rate=rate)


def _index():
    return build_index(
        [
            _rec("Ohio", 2014, 100, 10.0),
            _rec("Ohio", 2015, 300, 12.0),
            _rec("Iowa", 2014, 50, 30.0),
            _rec("Iowa", 2015, 80, 4.0),
        ]
    )


def test_value_domain_spans_all_years() -> None:
    idx = _index()
    assert value_domain(idx, Metric.DEATH_COUNT) == (50.0, 300.0)
    assert value_domain(idx, Metric.ADJUSTED_RATE) == (4.0, 30.0)


def test_value_domain_empty_index_is_none() -> None:
    assert value_domain(build_index([]), Metric.DEATH_COUNT) is None


def test_trend_line_identity_points() -> None:
    t = trend_line([(0, 0), (10, 10)])
    assert t is not None
    assert t.slope == pytest.approx(1.0)
    assert t.intercept == pytest.approx(0.0)
    assert (t.x1, t.y1, t.x2, t.y2) == pytest.approx((0.0, 0.0, 10.0, 10.0))


def test_trend_line_endpoints_use_extreme_x_in_any_order() -> None:
    # y = 2x + 1 with shuffled input
    t = trend_line([(3, 7), (1, 3), (2, 5)])
    assert t is not None
    assert t.slope == pytest.approx(2.0)
    assert t.intercept == pytest.approx(1.0)
    assert (t.x1, t.y1) == pytest.approx((1.0, 3.0))
    assert (t.x2, t.y2) == pytest.approx((3.0, 7.0))


def test_trend_line_fewer_than_two_points_is_none() -> None:
    assert trend_line([]) is None
    assert trend_line([(1.0, 2.0)]) is None


def test_trend_line_vertical_input_is_none_and_fit_line_raises() -> None:
    pts = [(5.0, 1.0), (5.0, 2.0), (5.0, 3.0)]
    assert trend_line(pts) is None
    with pytest.raises(DegenerateComputation):
        fit_line(pts)


def test_fit_line_rejects_non_finite() -> None:
    with pytest.raises(DegenerateComputation):
        fit_line([(0.0, 0.0), (1.0, math.inf)])


def test_year_summary_total_or_mean() -> None:
    idx = _index()
    assert year_summary(idx, 2014, Metric.DEATH_COUNT) == 150.0
    assert year_summary(idx, 2015, Metric.ADJUSTED_RATE) == pytest.approx(8.0)
    assert year_summary(idx, 1999, Metric.DEATH_COUNT) is None


def test_heatmap_cells_cover_grid_with_gaps_as_none() -> None:
    idx = build_index([_rec("Ohio", 2014, 1, 1.0), _rec("Iowa", 2015, 2, 2.0)])
    cells = heatmap_cells(idx, Metric.DEATH_COUNT, ["Ohio", "Iowa"])
    assert len(cells) == 4
    by_key = {(c["state"], c["year"]): c for c in cells}
    assert by_key[("Ohio", 2014)]["value"] == 1.0
    assert by_key[("Ohio", 2015)]["value"] is None
    assert by_key[("Iowa", 2015)]["row"] == 1


def test_scatter_points_filter_by_year() -> None:
    idx = _index()
    assert len(scatter_points(idx)) == 4
    assert sorted(scatter_points(idx, 2015)) == [(80.0, 4.0), (300.0, 12.0)]
    assert scatter_points(idx, 1999) == []
