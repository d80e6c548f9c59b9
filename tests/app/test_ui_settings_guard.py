from __future__ import annotations

import importlib
from types import SimpleNamespace

import pytest

ui_app = importlib.import_module("app.ui.app")


class _FakeStreamlit(SimpleNamespace):
    def __init__(self) -> None:
        super().__init__(errors=[])

    def set_page_config(self, **_: object) -> None:
        return None

    def error(self, msg: str) -> None:
        self.errors.append(msg)

    def __getattr__(self, name: str):
        raise AssertionError(f"page rendered past settings check (st.{name})")


@pytest.fixture
def fake_st(monkeypatch, tmp_path):
    for key in ("MORTALITY_START_YEAR", "MORTALITY_END_YEAR", "MORTALITY_TICK_INTERVAL_MS"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    fake = _FakeStreamlit()
    monkeypatch.setattr(ui_app, "st", fake, raising=True)
    return fake


def test_inverted_year_range_is_reported_not_raised(monkeypatch, fake_st) -> None:
    monkeypatch.setenv("MORTALITY_START_YEAR", "2023")
    monkeypatch.setenv("MORTALITY_END_YEAR", "2014")

    ui_app.streamlit_app()

    assert len(fake_st.errors) == 1
    assert "start_year 2023 is after end_year 2014" in fake_st.errors[0]


@pytest.mark.parametrize("tick_ms", [0, -50])
def test_non_positive_cli_interval_is_reported_not_raised(fake_st, tick_ms: int) -> None:
    ui_app.streamlit_app(default_tick_ms=tick_ms)

    assert len(fake_st.errors) == 1
    assert "tick_interval_ms must be positive" in fake_st.errors[0]
