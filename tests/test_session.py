from __future__ import annotations

from pathlib import Path

import pytest

from mortality.core.errors import DataIntegrityError
from mortality.core.grammar import Metric
from mortality.core.index import build_index
from mortality.core.schema import Record
from mortality.io.config import Settings
from mortality.io.errors import IoConfigError, LoadError
from mortality.session import ViewSession

HEADER = "Year,State,Deaths,Age Adjusted Rate,URL\n"


def _rec(state: str, year: int, deaths: int, rate: float) -> Record:
    return Record(year=year, state=state, death_count=deaths, adjusted_rate=rate)


def _index():
    return build_index(
        [
            _rec("Ohio", 2014, 100, 10.0),
            _rec("Ohio", 2023, 150, 12.0),
            _rec("Texas", 2014, 200, 8.0),
            _rec("Texas", 2023, 100, 6.0),
            _rec("Maine", 2014, 0, 0.0),
            _rec("Maine", 2023, 10, 1.0),
        ]
    )


def test_load_keeps_previous_index_when_reload_fails(tmp_path: Path) -> None:
    # Arrange
    good = tmp_path / "good.csv"
    good.write_text(HEADER + "2014,Ohio,10,1.5,\n2015,Ohio,12,1.75,\n")
    dup = tmp_path / "dup.csv"
    dup.write_text(HEADER + "2014,Ohio,10,1.5,\n2014,Ohio,11,1.6,\n")
    session = ViewSession(settings=Settings(data_path=str(good)))

    # Act
    first = session.load()

    # Assert
    assert len(first) == 2
    with pytest.raises(DataIntegrityError):
        session.load(dup)
    with pytest.raises(LoadError):
        session.load(tmp_path / "missing.csv")
    assert session.index is first


def test_reads_without_index_raise_load_error() -> None:
    session = ViewSession()
    with pytest.raises(LoadError, match="no data loaded"):
        session.domain()


def test_views_keep_independent_configs() -> None:
    index = _index()
    heat = ViewSession(index)
    change = ViewSession(index)

    heat.configure(metric="deaths")

    assert heat.config.metric is Metric.DEATH_COUNT
    assert change.config.metric is Metric.ADJUSTED_RATE
    assert heat.index is change.index


def test_ranked_changes_respect_sort_toggle() -> None:
    session = ViewSession(_index(), settings=Settings(start_year=2014, end_year=2023))

    ranked = [c.state for c in session.ranked_changes()]
    session.configure(sort_enabled=False)
    unranked = [c.state for c in session.ranked_changes()]

    # Maine starts at zero: no percentage, so it cannot be ranked
    assert ranked == ["Ohio", "Texas"]
    assert unranked == ["Maine", "Ohio", "Texas"]


def test_ranked_states_by_average_or_name() -> None:
    session = ViewSession(_index())
    assert session.ranked_states() == ["Ohio", "Texas", "Maine"]
    session.configure(sort_enabled=False)
    assert session.ranked_states() == ["Maine", "Ohio", "Texas"]


def test_change_range_falls_back_to_index_years() -> None:
    index = build_index([_rec("Ohio", 2016, 1, 1.0), _rec("Ohio", 2019, 2, 2.0)])
    session = ViewSession(index, settings=Settings(start_year=2014, end_year=2023))

    assert session.change_range() == (2016, 2019)
    [change] = session.changes()
    assert change.percent_change == pytest.approx(100.0)


def test_trend_follows_toggle_and_selected_year() -> None:
    session = ViewSession(_index())

    assert session.trend() is not None

    session.configure(selected_year=2014)
    assert len(session.scatter()) == 3

    session.configure(show_trend_line=False)
    assert session.trend() is None


def test_from_settings_seeds_view_config() -> None:
    session = ViewSession.from_settings(Settings(metric="death_count", tick_interval_ms=900))
    assert session.config.metric is Metric.DEATH_COUNT
    assert session.config.tick_interval_ms == 900
    assert session.index is None


@pytest.mark.parametrize(
    "settings",
    [Settings(start_year=2023, end_year=2014), Settings(tick_interval_ms=0)],
)
def test_invalid_settings_are_rejected_at_construction(settings: Settings) -> None:
    with pytest.raises(IoConfigError):
        ViewSession(_index(), settings=settings)
    with pytest.raises(IoConfigError):
        ViewSession.from_settings(settings)


def test_summary_reads_current_metric() -> None:
    session = ViewSession(_index())

    rate = session.summary()
    session.configure(metric="deaths")
    deaths = session.summary()

    assert rate is not None and deaths is not None
    # Rate: Ohio +20, Texas -25 (Maine undefined). Deaths: Ohio +50, Texas -50
    assert rate.mean_change == pytest.approx(-2.5)
    assert deaths.mean_change == pytest.approx(0.0)
    assert (deaths.increased, deaths.decreased) == (1, 1)
