"""
Enumerations and normalization helpers shared across the stack.

Responsibilities
- Define the selectable metric, ranking mode, and sort order enums.
- Parse user/config strings into enums, accepting the legacy dashboard aliases.
- Read a metric value off a record generically.

Naming
- Enum classes: PascalCase; members: UPPER_SNAKE; serialized values: lower_snake.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from .schema import Record

__all__ = [
    "Metric",
    "RankBy",
    "SortOrder",
    "metric_from_value",
    "metric_value",
    "metric_label",
    "ensure_all_enum_values_lower_snake",
]


class Metric(Enum):
    """
    Numeric field of a Record driving colour scales and derived computations.

    Notes:
      Values match Record field names so the engine can read them generically.
    """

    DEATH_COUNT = "death_count"
    ADJUSTED_RATE = "adjusted_rate"


class RankBy(Enum):
    """Ordering modes for rank_states."""

    AVERAGE_VALUE = "average_value"
    CHANGE = "change"


class SortOrder(Enum):
    DESCENDING = "descending"
    ASCENDING = "ascending"


# Aliases used by the original dashboard toggles (data-metric attributes) and camelCase configs.
_METRIC_ALIASES: dict[str, Metric] = {
    "deaths": Metric.DEATH_COUNT,
    "deathcount": Metric.DEATH_COUNT,
    "rate": Metric.ADJUSTED_RATE,
    "adjustedrate": Metric.ADJUSTED_RATE,
}

_LABELS: dict[Metric, str] = {
    Metric.DEATH_COUNT: "Total Deaths",
    Metric.ADJUSTED_RATE: "Age Adjusted Rate",
}


def metric_from_value(s: str | Metric) -> Metric:
    """
    Parse a metric token into a Metric.

    Args:
      s (str | Metric): "death_count", "adjusted_rate", or an alias
        ("deaths", "rate", "deathCount", "adjustedRate").

    Returns:
      Metric: Parsed metric.

    Raises:
      ValueError: If the token is not a known metric.

    Examples:
      >>> metric_from_value("rate")
      <Metric.ADJUSTED_RATE: 'adjusted_rate'>
    """
    if isinstance(s, Metric):
        return s
    token = (s or "").strip()
    allowed = {m.value for m in Metric}
    if token in allowed:
        return Metric(token)
    alias = _METRIC_ALIASES.get(token.lower().replace("_", ""))
    if alias is None:
        raise ValueError(f"metric must be one of {sorted(allowed)} (got {s!r})")
    return alias


def metric_value(record: Record, metric: Metric) -> float:
    """Return the selected numeric field of a record as a float."""
    return float(getattr(record, metric.value))


def metric_label(metric: Metric) -> str:
    return _LABELS[metric]


def ensure_all_enum_values_lower_snake(enums: Iterable[type[Enum]]) -> None:
    """
    Assert that every enum member's value is lower_snake.

    Raises:
      AssertionError: If any enum member has a non-lower_snake value.
    """
    for E in enums:
        for m in E:
            v = m.value
            assert isinstance(v, str) and v == v.lower() and " " not in v, (
                f"{E.__name__}.{m.name} value {v!r} is not lower_snake"
            )
