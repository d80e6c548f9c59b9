"""
Pydantic v2 models for records, derived results, playback snapshots, and view configuration.

Responsibilities
- Define the canonical Record row (one (state, year) observation).
- Define the derived result models returned by mortality.core.metrics (DerivedChange,
  ChangeSummary, TrendLine).
- Define PlaybackState, the immutable snapshot emitted by the playback controller.
- Define ViewConfig, the configuration surface set by the interaction layer.

Style
- Zero-IO (stdlib + pydantic only).
- All models are frozen: renderers receive read-only snapshots.
- Google-style docstrings with Attributes, Raises, Examples and Notes where useful.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .constants import DEFAULT_TICK_INTERVAL_MS
from .grammar import Metric, metric_from_value

__all__ = [
    "Record",
    "DerivedChange",
    "ChangeSummary",
    "TrendLine",
    "PlaybackState",
    "ViewConfig",
]


class Record(BaseModel):
    """
    One (state, year) mortality observation.

    Attributes:
        year (int): Calendar year.
        state (str): State name (natural-key component; stripped, non-empty).
        death_count (int): Number of deaths, >= 0.
        adjusted_rate (float): Age-adjusted death rate, >= 0 and finite.
        source_url (str): Link to the source page for the observation.

    Raises:
        pydantic.ValidationError: On negative or non-finite numbers or an empty state.

    Notes:
        The pair (state, year) is the natural key and must be unique within a dataset;
        mortality.core.index.build_index enforces it.

    Examples:
        >>> from mortality.core.schema import Record
        >>> Record(year=2014, state="Ohio", death_count=120, adjusted_rate=10.5, source_url="")
        Record(year=2014, state='Ohio', death_count=120, adjusted_rate=10.5, source_url='')
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    year: int
    state: str
    death_count: int = Field(..., ge=0)
    adjusted_rate: float = Field(..., ge=0.0, allow_inf_nan=False)
    source_url: str = ""

    @field_validator("state")
    @classmethod
    def _strip_state(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("state must be non-empty")
        return v

    @property
    def key(self) -> tuple[str, int]:
        return (self.state, self.year)


class DerivedChange(BaseModel):
    """
    Start-to-end change of one state's metric over a year range.

    Attributes:
        state (str): State name.
        start_value (float): Metric value in the start year.
        end_value (float): Metric value in the end year.
        percent_change (float | None): (end - start) / start * 100, or None when
            start_value is zero (undefined; excluded from percentage ranking).
        absolute_change (float): end - start (always defined).
        start_deaths, end_deaths (int): Raw death counts for tooltips.
        start_rate, end_rate (float): Raw adjusted rates for tooltips.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    state: str
    start_value: float
    end_value: float
    percent_change: float | None
    absolute_change: float
    start_deaths: int
    end_deaths: int
    start_rate: float
    end_rate: float


class ChangeSummary(BaseModel):
    """
    Aggregate of the defined percentage changes shown above the change chart.

    Attributes:
        count (int): Number of states with a defined percent_change.
        mean_change (float): Average percent_change.
        max_increase (float): Largest percent_change (may be negative if every state fell).
        max_increase_state (str): State holding max_increase (first by name on ties).
        max_decrease (float): Smallest percent_change.
        max_decrease_state (str): State holding max_decrease (first by name on ties).
        increased (int): States with percent_change > 0.
        decreased (int): States with percent_change < 0.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    count: int = Field(..., gt=0)
    mean_change: float
    max_increase: float
    max_increase_state: str
    max_decrease: float
    max_decrease_state: str
    increased: int = Field(..., ge=0)
    decreased: int = Field(..., ge=0)


class TrendLine(BaseModel):
    """
    Ordinary-least-squares fit evaluated at the extreme x values of the input points.

    Attributes:
        x1, y1 (float): Endpoint at the minimum x.
        x2, y2 (float): Endpoint at the maximum x.
        slope (float): Fitted slope.
        intercept (float): Fitted intercept.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    x1: float
    y1: float
    x2: float
    y2: float
    slope: float
    intercept: float


class PlaybackState(BaseModel):
    """
    Immutable snapshot of the animated map's playback cursor.

    Attributes:
        current_year (int): Year currently displayed; within [min_year, max_year].
        is_playing (bool): Whether the recurring timer is armed.
        tick_interval_ms (int): Milliseconds between ticks (> 0).
        min_year (int): First year of the loop.
        max_year (int): Last year of the loop (>= min_year).

    Raises:
        pydantic.ValidationError: If the range is inverted or current_year is outside it.

    Examples:
        >>> s = PlaybackState(current_year=2016, is_playing=True, tick_interval_ms=1500,
        ...                   min_year=2014, max_year=2023)
        >>> (s.position, s.span)
        (3, 10)
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    current_year: int
    is_playing: bool
    tick_interval_ms: int = Field(..., gt=0)
    min_year: int
    max_year: int

    @model_validator(mode="after")
    def _check_range(self) -> PlaybackState:
        if self.min_year > self.max_year:
            raise ValueError(f"min_year {self.min_year} > max_year {self.max_year}")
        if not self.min_year <= self.current_year <= self.max_year:
            raise ValueError(
                f"current_year {self.current_year} outside [{self.min_year}, {self.max_year}]"
            )
        return self

    @property
    def position(self) -> int:
        """1-based offset of current_year within the loop."""
        return self.current_year - self.min_year + 1

    @property
    def span(self) -> int:
        return self.max_year - self.min_year + 1

    def progress_label(self) -> str:
        return f"Year {self.position} of {self.span} ({self.min_year}-{self.max_year})"


class ViewConfig(BaseModel):
    """
    Configuration a view receives from its controls.

    Attributes:
        metric (Metric): Selected numeric field; accepts enum values or dashboard aliases.
        sort_enabled (bool): Rank states (by average or by change) instead of alphabetically.
        selected_year (int | "all"): Scatter plot year filter.
        show_trend_line (bool): Overlay the OLS trend line on the scatter plot.
        tick_interval_ms (int): Playback interval in milliseconds (> 0).
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    metric: Metric = Metric.ADJUSTED_RATE
    sort_enabled: bool = True
    selected_year: int | Literal["all"] = "all"
    show_trend_line: bool = True
    tick_interval_ms: int = Field(DEFAULT_TICK_INTERVAL_MS, gt=0)

    @field_validator("metric", mode="before")
    @classmethod
    def _parse_metric(cls, v: Any) -> Metric:
        return metric_from_value(v)

    def with_changes(self, **changes: Any) -> ViewConfig:
        """Return a validated copy with the given fields replaced."""
        data = self.model_dump()
        data.update(changes)
        return ViewConfig.model_validate(data)
