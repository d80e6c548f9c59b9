"""
Streamlit application orchestrator for the mortality explorer.

Responsibilities:
    - Configure the Streamlit page and resolve Settings (env > TOML > defaults).
    - Load the shared Index once via app.data (cached, immutable).
    - Mount the four views (Animated Map, Heatmap, Percentage Change, Scatter Plot), each
      with its own ViewSession stored in st.session_state.
    - Drive the animated map with a PlaybackController over a ManualScheduler that is
      advanced by elapsed wall time whenever the map fragment reruns.

Notes:
    - Charts are produced by app.charts; all numbers come from mortality.core.
    - A LoadError or DataIntegrityError stops the page with an error message.
"""

from __future__ import annotations

import time
from dataclasses import replace
from typing import Any, cast

import streamlit as st

from app import charts as app_charts
from app.data import CacheConfig, load_index
from mortality.core.errors import DataIntegrityError
from mortality.core.grammar import Metric, metric_label
from mortality.core.index import Index
from mortality.core.metrics import max_abs_change, year_summary
from mortality.io.config import Settings
from mortality.io.errors import IoConfigError, LoadError
from mortality.playback import ManualScheduler, PlaybackController
from mortality.session import ViewSession

from .helpers import (
    change_summary_caption,
    play_button_label,
    speed_slider_bounds,
    summary_caption,
)

_METRICS = [Metric.ADJUSTED_RATE, Metric.DEATH_COUNT]


def _view_session(name: str, index: Index, settings: Settings) -> ViewSession:
    """Per-view session kept across reruns; always bound to the current shared index."""
    key = f"view_{name}"
    session = st.session_state.get(key)
    if session is None:
        session = ViewSession.from_settings(settings)
        st.session_state[key] = session
    session.use_index(index)
    return cast(ViewSession, session)


def _metric_picker(session: ViewSession, key: str) -> Metric:
    metric = st.radio(
        "Metric",
        options=_METRICS,
        index=_METRICS.index(session.config.metric),
        format_func=metric_label,
        horizontal=True,
        key=key,
    )
    session.configure(metric=metric)
    return cast(Metric, metric)


def _playback(index: Index, settings: Settings) -> PlaybackController:
    """Return the session's controller, rebuilding it when the year range changes."""
    years = (index.all_years[0], index.all_years[-1]) if index.all_years else None
    pc = st.session_state.get("playback")
    if pc is None or st.session_state.get("playback_years") != years:
        if pc is not None:
            pc.close()
        clock = ManualScheduler()
        pc = PlaybackController.from_index(index, clock, settings)
        st.session_state["playback"] = pc
        st.session_state["playback_clock"] = clock
        st.session_state["playback_wall"] = time.monotonic()
        st.session_state["playback_years"] = years
    return cast(PlaybackController, pc)


def _advance_playback_clock() -> None:
    now = time.monotonic()
    last = st.session_state.get("playback_wall", now)
    st.session_state["playback_wall"] = now
    clock = cast(ManualScheduler, st.session_state["playback_clock"])
    clock.advance(max(0.0, now - last))


def streamlit_app(default_data: str | None = None, default_tick_ms: int | None = None) -> None:
    """Render the mortality explorer.

    Args:
        default_data (str | None): CSV path or URL overriding Settings.data_path.
        default_tick_ms (int | None): Playback interval overriding Settings.tick_interval_ms.

    Returns:
        None
    """
    st.set_page_config(page_title="State Mortality Explorer", layout="wide")

    settings = Settings.load()
    overrides: dict[str, Any] = {}
    if default_data:
        overrides["data_path"] = default_data
    if default_tick_ms is not None:
        overrides["tick_interval_ms"] = int(default_tick_ms)
    try:
        settings = replace(settings, **overrides).validate()
    except IoConfigError as e:
        st.error(f"Invalid settings: {e}")
        return

    with st.sidebar:
        st.markdown("### Data")
        source = st.text_input("CSV path or URL", value=settings.data_path, key="data_source")
        cache_ttl = st.number_input("Cache TTL (s, 0 = forever)", min_value=0, value=0, step=60)
    cache_cfg = CacheConfig(ttl=int(cache_ttl) or None)

    try:
        with st.spinner("Loading data ..."):
            index = load_index(source, cfg=cache_cfg)
    except LoadError as e:
        st.error(f"Could not load data: {e}")
        return
    except DataIntegrityError as e:
        st.error(f"Data failed validation: {e}")
        return
    if index.is_empty:
        st.warning("The data source has no rows.")
        return

    tab_map, tab_heat, tab_change, tab_scatter = st.tabs(
        ["Animated Map", "Heatmap", "Percentage Change", "Scatter Plot"]
    )

    # ----------------------------
    # Animated map
    # ----------------------------
    with tab_map:
        session = _view_session("map", index, settings)
        metric = _metric_picker(session, "map_metric")
        pc = _playback(index, settings)

        c1, c2, c3 = st.columns(3)
        with c1:
            if st.button(play_button_label(pc.state), key="map_play"):
                pc.toggle()
        with c2:
            lo, hi = speed_slider_bounds(pc.state.tick_interval_ms)
            speed = st.slider(
                "Speed (ms per year)",
                min_value=lo,
                max_value=hi,
                value=pc.state.tick_interval_ms,
                step=100,
                key="map_speed",
            )
            if speed != pc.state.tick_interval_ms:
                pc.set_speed(int(speed))
        with c3:
            jump = st.selectbox("Jump to year", options=list(index.all_years), key="map_jump")
            if st.button("Go", key="map_jump_go"):
                pc.set_year(int(jump))

        domain = session.domain()

        @st.fragment(run_every=pc.state.tick_interval_ms / 1000.0)
        def _animated_map() -> None:
            _advance_playback_clock()
            state = pc.state
            ch = app_charts.choropleth_chart(index, metric, state.current_year, domain)
            st.altair_chart(cast(Any, ch), theme=None, use_container_width=True)
            st.caption(state.progress_label())
            st.caption(summary_caption(year_summary(index, state.current_year, metric), metric))

        _animated_map()

    # ----------------------------
    # Heatmap
    # ----------------------------
    with tab_heat:
        session = _view_session("heatmap", index, settings)
        metric = _metric_picker(session, "heat_metric")
        session.configure(sort_enabled=st.checkbox("Sort states by average", value=True, key="heat_sort"))
        show_values = st.checkbox("Show values", value=False, key="heat_values")
        order = session.ranked_states()
        ch = app_charts.heatmap_chart(
            session.heatmap(), order, metric, session.domain(), show_labels=show_values
        )
        st.altair_chart(cast(Any, ch), theme=None, use_container_width=True)

    # ----------------------------
    # Percentage change
    # ----------------------------
    with tab_change:
        session = _view_session("change", index, settings)
        metric = _metric_picker(session, "change_metric")
        session.configure(sort_enabled=st.checkbox("Sort by change", value=True, key="change_sort"))
        changes = session.ranked_changes()
        undefined = [c.state for c in session.changes() if c.percent_change is None]
        start_year, end_year = session.change_range()
        summary = session.summary()
        if summary is not None:
            st.caption(change_summary_caption(summary))
        if not changes:
            st.info(f"No state has records in both {start_year} and {end_year}.")
        else:
            ch = app_charts.change_chart(
                changes,
                metric,
                max_abs=max_abs_change(changes),
                start_year=start_year,
                end_year=end_year,
            )
            st.altair_chart(cast(Any, ch), theme=None, use_container_width=True)
        if undefined:
            st.caption("No percentage for (zero start value): " + ", ".join(undefined))

    # ----------------------------
    # Scatter plot
    # ----------------------------
    with tab_scatter:
        session = _view_session("scatter", index, settings)
        year_options: list[Any] = ["all", *index.all_years]
        c1, c2, c3 = st.columns(3)
        with c1:
            selected = st.selectbox(
                "Year",
                options=year_options,
                format_func=lambda y: "All years" if y == "all" else str(y),
                key="scatter_year",
            )
        with c2:
            show_trend = st.checkbox("Show trend line", value=True, key="scatter_trend")
        with c3:
            show_labels = st.checkbox("Show labels", value=False, key="scatter_labels")
        session.configure(selected_year=selected, show_trend_line=show_trend)
        trend = session.trend()
        ch = app_charts.scatter_chart(index, session.config.selected_year, trend, show_labels=show_labels)
        st.altair_chart(cast(Any, ch), theme=None, use_container_width=True)
        if show_trend and trend is None:
            st.caption("Not enough distinct points for a trend line.")
        elif trend is not None:
            st.caption(f"slope {trend.slope:.4g}, intercept {trend.intercept:.4g}")
