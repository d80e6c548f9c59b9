from __future__ import annotations

import pytest

from mortality.core.constants import state_abbreviation
from mortality.core.grammar import (
    Metric,
    RankBy,
    SortOrder,
    ensure_all_enum_values_lower_snake,
    metric_from_value,
    metric_label,
    metric_value,
)
from mortality.core.schema import Record


def test_all_enum_values_are_lower_snake() -> None:
    ensure_all_enum_values_lower_snake([Metric, RankBy, SortOrder])


@pytest.mark.parametrize(
    "token, expected",
    [
        ("death_count", Metric.DEATH_COUNT),
        ("deaths", Metric.DEATH_COUNT),
        ("deathCount", Metric.DEATH_COUNT),
        ("adjusted_rate", Metric.ADJUSTED_RATE),
        ("rate", Metric.ADJUSTED_RATE),
        ("adjustedRate", Metric.ADJUSTED_RATE),
    ],
)
def test_metric_from_value_accepts_aliases(token: str, expected: Metric) -> None:
    assert metric_from_value(token) is expected


def test_metric_from_value_rejects_unknown() -> None:
    with pytest.raises(ValueError):
        metric_from_value("population")


def test_metric_value_reads_field_generically() -> None:
    r = Record(year=2014, state="Ohio", death_count=120, adjusted_rate=10.5)
    assert metric_value(r, Metric.DEATH_COUNT) == 120.0
    assert metric_value(r, Metric.ADJUSTED_RATE) == 10.5
    assert metric_label(Metric.DEATH_COUNT) == "Total Deaths"


def test_state_abbreviation_with_fallback() -> None:
    assert state_abbreviation("District of Columbia") == "DC"
    assert state_abbreviation("Puerto Rico") == "PU"
