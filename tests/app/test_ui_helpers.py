from __future__ import annotations

from app.ui.helpers import (
    change_summary_caption,
    format_metric_value,
    play_button_label,
    speed_slider_bounds,
    summary_caption,
)
from mortality.core.grammar import Metric
from mortality.core.schema import ChangeSummary, PlaybackState


def test_format_metric_value_per_metric() -> None:
    assert format_metric_value(12345.0, Metric.DEATH_COUNT) == "12,345"
    assert format_metric_value(10.254, Metric.ADJUSTED_RATE) == "10.25"
    assert format_metric_value(None, Metric.ADJUSTED_RATE) == "n/a"


def test_summary_caption_uses_total_or_average() -> None:
    assert summary_caption(300.0, Metric.DEATH_COUNT) == "Total: 300"
    assert summary_caption(7.5, Metric.ADJUSTED_RATE) == "Average: 7.50"


def test_play_button_label_reflects_state() -> None:
    base = dict(current_year=2014, tick_interval_ms=1500, min_year=2014, max_year=2023)
    assert play_button_label(PlaybackState(is_playing=True, **base)) == "Pause"
    assert play_button_label(PlaybackState(is_playing=False, **base)) == "Play"


def test_change_summary_caption() -> None:
    summary = ChangeSummary(
        count=3,
        mean_change=10.0,
        max_increase=50.0,
        max_increase_state="Ohio",
        max_decrease=-20.0,
        max_decrease_state="Iowa",
        increased=1,
        decreased=1,
    )
    text = change_summary_caption(summary)
    assert text.startswith("Avg change: +10.00%")
    assert "Largest increase: Ohio (+50.0%)" in text
    assert "Largest decrease: Iowa (-20.0%)" in text
    assert text.endswith("Increased: 1 states | Decreased: 1 states")
    assert change_summary_caption(None) == ""


def test_speed_slider_bounds_cover_configured_interval() -> None:
    assert speed_slider_bounds(1500) == (300, 3000)
    assert speed_slider_bounds(100) == (100, 3000)
    assert speed_slider_bounds(5000) == (300, 5000)
