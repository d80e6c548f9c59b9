"""
Shared UI helper utilities for the mortality Streamlit application.

Small formatting helpers used by several tabs. No Streamlit state manipulation here.
"""

from __future__ import annotations

from mortality.core.grammar import Metric
from mortality.core.schema import ChangeSummary, PlaybackState


def format_metric_value(value: float | None, metric: Metric) -> str:
    """Format a metric value for captions and legends.

    Args:
        value (float | None): Value to format; None renders as "n/a".
        metric (Metric): Death counts use thousands separators, rates two decimals.

    Returns:
        str: e.g. "12,345" or "10.25".
    """
    if value is None:
        return "n/a"
    if metric is Metric.DEATH_COUNT:
        return f"{value:,.0f}"
    return f"{value:.2f}"


def summary_caption(value: float | None, metric: Metric) -> str:
    """Caption under the animated map: a total for deaths, an average for rates."""
    prefix = "Total" if metric is Metric.DEATH_COUNT else "Average"
    return f"{prefix}: {format_metric_value(value, metric)}"


def play_button_label(state: PlaybackState) -> str:
    return "Pause" if state.is_playing else "Play"


def change_summary_caption(summary: ChangeSummary | None) -> str:
    """One-line summary above the change chart; empty when no change is defined."""
    if summary is None:
        return ""
    return (
        f"Avg change: {summary.mean_change:+.2f}% | "
        f"Largest increase: {summary.max_increase_state} ({summary.max_increase:+.1f}%) | "
        f"Largest decrease: {summary.max_decrease_state} ({summary.max_decrease:+.1f}%) | "
        f"Increased: {summary.increased} states | Decreased: {summary.decreased} states"
    )


def speed_slider_bounds(tick_interval_ms: int, lo: int = 300, hi: int = 3000) -> tuple[int, int]:
    """Slider range widened so a configured interval outside [lo, hi] stays selectable."""
    return min(lo, tick_interval_ms), max(hi, tick_interval_ms)
