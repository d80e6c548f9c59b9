from __future__ import annotations

import math

import pytest
from pydantic import ValidationError

from mortality.core.grammar import Metric
from mortality.core.schema import PlaybackState, Record, ViewConfig


def test_record_rejects_negative_and_non_finite_values() -> None:
    with pytest.raises(ValidationError):
        Record(year=2014, state="Ohio", death_count=-1, adjusted_rate=1.0)
    with pytest.raises(ValidationError):
        Record(year=2014, state="Ohio", death_count=1, adjusted_rate=math.nan)
    with pytest.raises(ValidationError):
        Record(year=2014, state="  ", death_count=1, adjusted_rate=1.0)


def test_record_is_frozen_and_keyed() -> None:
    r = Record(year=2014, state=" Ohio ", death_count=1, adjusted_rate=1.0)
    assert r.key == ("Ohio", 2014)
    with pytest.raises(ValidationError):
        r.year = 2015  # type: ignore[misc]


def test_playback_state_range_and_progress() -> None:
    s = PlaybackState(
        current_year=2014, is_playing=True, tick_interval_ms=1500, min_year=2014, max_year=2023
    )
    assert (s.position, s.span) == (1, 10)
    assert s.progress_label() == "Year 1 of 10 (2014-2023)"
    with pytest.raises(ValidationError):
        PlaybackState(
            current_year=2030, is_playing=True, tick_interval_ms=1500, min_year=2014, max_year=2023
        )
    with pytest.raises(ValidationError):
        PlaybackState(
            current_year=2014, is_playing=True, tick_interval_ms=0, min_year=2014, max_year=2023
        )


def test_view_config_accepts_aliases_and_validates_changes() -> None:
    cfg = ViewConfig(metric="deaths")
    assert cfg.metric is Metric.DEATH_COUNT
    assert cfg.selected_year == "all"

    cfg2 = cfg.with_changes(selected_year=2016, show_trend_line=False)
    assert cfg2.selected_year == 2016 and cfg2.show_trend_line is False
    assert cfg.selected_year == "all"  # original untouched

    with pytest.raises(ValidationError):
        cfg.with_changes(tick_interval_ms=0)
    with pytest.raises(ValidationError):
        cfg.with_changes(metric="population")
