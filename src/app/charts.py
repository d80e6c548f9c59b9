from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Literal

import altair as alt

from mortality.core.constants import STATE_FIPS, state_abbreviation
from mortality.core.grammar import Metric, metric_label, metric_value
from mortality.core.index import Index
from mortality.core.schema import DerivedChange, TrendLine

# us-atlas v3 state features carry zero-padded FIPS strings as ids ("01", "02", ...).
US_ATLAS_STATES_URL = "https://cdn.jsdelivr.net/npm/us-atlas@3/states-10m.json"
MISSING_COLOR = "#e0e0e0"


# Uniform chart defaults for a professional look
def _apply_chart_defaults(ch: alt.TopLevelMixin) -> alt.TopLevelMixin:
    try:
        return (
            ch.configure_axis(labelFontSize=12, titleFontSize=12, grid=True)
            .configure_legend(labelFontSize=12, titleFontSize=12)
            .configure_title(fontSize=14)
            .configure_view(strokeOpacity=0)
        )
    except Exception:
        # If configuration fails (e.g., non-top-level), return chart as-is
        return ch


def _scale(domain: tuple[float, float] | None, scheme: str) -> alt.Scale:
    if domain is None:
        return alt.Scale(scheme=scheme)
    return alt.Scale(scheme=scheme, domain=[float(domain[0]), float(domain[1])])


def layer_with_overlay(base: object, overlay: object) -> alt.LayerChart:
    """Return a LayerChart combining a base chart with an overlay chart."""
    return alt.layer(base, overlay)  # type: ignore


# ----------------------------
# Animated choropleth
# ----------------------------


def choropleth_values(index: Index, metric: Metric, year: int) -> list[dict[str, Any]]:
    """Lookup rows for the map at one year: one per drawable state, value None when missing."""
    present = {r.state: r for r in index.by_year.get(year, ())}
    rows: list[dict[str, Any]] = []
    for state, fips in STATE_FIPS.items():
        rec = present.get(state)
        rows.append(
            {
                "id": f"{fips:02d}",
                "state": state,
                "abbr": state_abbreviation(state),
                "year": year,
                "value": None if rec is None else metric_value(rec, metric),
                "death_count": None if rec is None else rec.death_count,
                "adjusted_rate": None if rec is None else rec.adjusted_rate,
            }
        )
    return rows


def choropleth_chart(
    index: Index,
    metric: Metric,
    year: int,
    domain: tuple[float, float] | None,
    *,
    width: int = 800,
    height: int = 450,
) -> alt.TopLevelMixin:
    """Map coloured on a domain computed over all years, so colours stay fixed while animating."""
    label = metric_label(metric)
    states = alt.topo_feature(US_ATLAS_STATES_URL, "states")
    lookup = alt.LookupData(
        alt.Data(values=choropleth_values(index, metric, year)),
        "id",
        ["state", "value", "death_count", "adjusted_rate"],
    )
    ch = (
        alt.Chart(states)
        .mark_geoshape(stroke="white", strokeWidth=1)
        .transform_lookup(lookup="id", from_=lookup)
        .encode(
            color=alt.condition(
                "isValid(datum.value)",
                alt.Color("value:Q", scale=_scale(domain, "yelloworangered"), title=label),
                alt.value(MISSING_COLOR),
            ),
            tooltip=[
                alt.Tooltip("state:N", title="State"),
                alt.Tooltip("death_count:Q", title="Deaths", format=","),
                alt.Tooltip("adjusted_rate:Q", title="Age Adjusted Rate", format=".2f"),
            ],
        )
        .project(type="albersUsa")
        .properties(width=width, height=height, title=f"{label}, {year}")
    )
    return _apply_chart_defaults(ch)


# ----------------------------
# Heatmap
# ----------------------------


def heatmap_label(value: float | None, metric: Metric) -> str:
    """Cell text: deaths >= 1000 as "1.2k", other deaths as integers, rates to one decimal."""
    if value is None:
        return ""
    if metric is Metric.DEATH_COUNT:
        return f"{value / 1000:.1f}k" if value >= 1000 else f"{value:.0f}"
    return f"{value:.1f}"


def heatmap_chart(
    cells: Sequence[dict[str, Any]],
    state_order: Sequence[str],
    metric: Metric,
    domain: tuple[float, float] | None,
    *,
    show_labels: bool = False,
) -> alt.TopLevelMixin:
    """Year×state grid; rows follow state_order (ranked or alphabetical)."""
    label = metric_label(metric)
    values = [{**c, "label": heatmap_label(c.get("value"), metric)} for c in cells]
    base = alt.Chart(alt.Data(values=values)).encode(
        x=alt.X("year:O", title="Year", axis=alt.Axis(orient="top")),
        y=alt.Y("state:N", sort=list(state_order), title=None),
    )
    rects = base.mark_rect(stroke="white", strokeWidth=0.5).encode(
        color=alt.condition(
            "isValid(datum.value)",
            alt.Color("value:Q", scale=_scale(domain, "yelloworangered"), title=label),
            alt.value(MISSING_COLOR),
        ),
        tooltip=[
            alt.Tooltip("state:N", title="State"),
            alt.Tooltip("year:O", title="Year"),
            alt.Tooltip("value:Q", title=label, format=",.2f"),
        ],
    )
    ch: Any = rects
    if show_labels:
        # Light text on the dark upper half of the colour scale
        mid = None if domain is None else (float(domain[0]) + float(domain[1])) / 2
        text_color: Any = (
            alt.value("#333")
            if mid is None
            else alt.condition(f"datum.value > {mid}", alt.value("#fff"), alt.value("#333"))
        )
        text = base.mark_text(fontSize=9).encode(text="label:N", color=text_color)
        ch = layer_with_overlay(rects, text)
    ch = ch.properties(height=max(200, 20 * len(state_order)))
    return _apply_chart_defaults(ch)


# ----------------------------
# Percentage change
# ----------------------------


def change_values(changes: Sequence[DerivedChange]) -> list[dict[str, Any]]:
    """Bar rows for changes with a defined percentage; order is preserved via `rank`."""
    rows: list[dict[str, Any]] = []
    for c in changes:
        if c.percent_change is None:
            continue
        rows.append(
            {
                "state": c.state,
                "abbr": state_abbreviation(c.state),
                "rank": len(rows),
                "percent_change": c.percent_change,
                "absolute_change": c.absolute_change,
                "start_value": c.start_value,
                "end_value": c.end_value,
                "direction": "increase" if c.percent_change >= 0 else "decrease",
            }
        )
    return rows


def change_chart(
    changes: Sequence[DerivedChange],
    metric: Metric,
    *,
    max_abs: float | None,
    start_year: int,
    end_year: int,
) -> alt.TopLevelMixin:
    """Diverging bars of percent change, symmetric around zero."""
    rows = change_values(changes)
    half = float(max_abs) if max_abs else 1.0
    bars = (
        alt.Chart(alt.Data(values=rows))
        .mark_bar()
        .encode(
            x=alt.X(
                "percent_change:Q",
                scale=alt.Scale(domain=[-half, half], nice=True),
                title=f"% change {start_year}-{end_year}",
            ),
            y=alt.Y("abbr:N", sort=alt.EncodingSortField(field="rank", order="ascending"), title=None),
            color=alt.Color(
                "direction:N",
                scale=alt.Scale(domain=["increase", "decrease"], range=["#d7301f", "#2b8cbe"]),
                legend=None,
            ),
            tooltip=[
                alt.Tooltip("state:N", title="State"),
                alt.Tooltip("start_value:Q", title=f"{start_year}", format=",.2f"),
                alt.Tooltip("end_value:Q", title=f"{end_year}", format=",.2f"),
                alt.Tooltip("percent_change:Q", title="% change", format="+.1f"),
                alt.Tooltip("absolute_change:Q", title="Change", format="+,.2f"),
            ],
        )
        .properties(height=max(200, 20 * len(rows)), title=metric_label(metric))
    )
    zero = alt.Chart(alt.Data(values=[{"x": 0.0}])).mark_rule(color="#333").encode(x="x:Q")
    return _apply_chart_defaults(layer_with_overlay(bars, zero))


# ----------------------------
# Scatter plot + trend line
# ----------------------------


def scatter_values(index: Index, selected_year: int | Literal["all"]) -> list[dict[str, Any]]:
    recs = index.records if selected_year == "all" else index.by_year.get(int(selected_year), ())
    return [
        {
            "state": r.state,
            "abbr": state_abbreviation(r.state),
            "year": r.year,
            "death_count": r.death_count,
            "adjusted_rate": r.adjusted_rate,
        }
        for r in recs
    ]


def scatter_chart(
    index: Index,
    selected_year: int | Literal["all"],
    trend: TrendLine | None,
    *,
    show_labels: bool = False,
) -> alt.TopLevelMixin:
    """Deaths (x) against age-adjusted rate (y); optional OLS overlay and state labels."""
    values = scatter_values(index, selected_year)
    base = alt.Chart(alt.Data(values=values)).encode(
        x=alt.X("death_count:Q", title="Deaths", scale=alt.Scale(nice=True, zero=False)),
        y=alt.Y("adjusted_rate:Q", title="Age Adjusted Rate", scale=alt.Scale(nice=True, zero=False)),
    )
    points = base.mark_circle(size=70, opacity=0.7).encode(
        color=alt.Color("year:O", title="Year"),
        tooltip=[
            alt.Tooltip("state:N", title="State"),
            alt.Tooltip("year:O", title="Year"),
            alt.Tooltip("death_count:Q", title="Deaths", format=","),
            alt.Tooltip("adjusted_rate:Q", title="Age Adjusted Rate", format=".2f"),
        ],
    )
    ch: Any = points
    if show_labels:
        ch = layer_with_overlay(ch, base.mark_text(dx=8, align="left", fontSize=9).encode(text="abbr:N"))
    if trend is not None:
        line = (
            alt.Chart(
                alt.Data(
                    values=[
                        {"death_count": trend.x1, "adjusted_rate": trend.y1},
                        {"death_count": trend.x2, "adjusted_rate": trend.y2},
                    ]
                )
            )
            .mark_line(color="#444", strokeDash=[6, 4])
            .encode(x="death_count:Q", y="adjusted_rate:Q")
        )
        ch = layer_with_overlay(ch, line)
    return _apply_chart_defaults(ch)
