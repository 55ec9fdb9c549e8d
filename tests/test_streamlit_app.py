from pathlib import Path

import pytest
import streamlit as st
from streamlit.testing.v1 import AppTest

from skybound.core.models import FilterState

APP_FILE = Path(__file__).resolve().parents[1] / "src" / "skybound" / "streamlit_app.py"


@pytest.fixture
def app(monkeypatch, tmp_path):
    monkeypatch.setenv("SKYBOUND_PROVIDER", "mock")
    monkeypatch.setenv("SKYBOUND_HISTORY_DB", str(tmp_path / "history.sqlite"))
    monkeypatch.setenv("SKYBOUND_PAGE_SIZE", "3")
    st.cache_resource.clear()
    st.cache_data.clear()

    at = AppTest.from_file(str(APP_FILE), default_timeout=30).run()
    at.button(key="search").click().run()
    assert not at.exception
    yield at
    st.cache_resource.clear()
    st.cache_data.clear()


def test_search_uses_location_suggestions(app):
    assert app.session_state["criteria"].origin == "JFK"
    assert app.session_state["criteria"].destination == "LHR"
    assert len(app.session_state["flights"]) == 8


def test_clear_filters_resets_every_widget(app):
    ceiling = app.session_state["price_ceiling"]
    bucket = app.radio(key="duration_bucket").options[1]

    app.radio(key="duration_bucket").set_value(bucket).run()
    assert app.session_state["duration_range"] is not None

    app.multiselect(key="filter_stops").set_value([1]).run()
    app.multiselect(key="filter_airlines").set_value(["AA"]).run()
    app.slider(key="filter_max_price").set_value(500.0).run()

    app.button(key="clear_filters").click().run()

    assert not app.exception
    assert app.session_state["duration_range"] is None
    assert app.radio(key="duration_bucket").value == "All durations"
    assert app.multiselect(key="filter_stops").value == []
    assert app.multiselect(key="filter_airlines").value == []
    assert app.slider(key="filter_max_price").value == ceiling
    assert len(app.session_state["flights"]) == 8


def test_stops_change_reruns_search_upstream(app):
    app.multiselect(key="filter_stops").set_value([0]).run()

    assert app.session_state["pushed"] == FilterState(stops={0})
    assert len(app.session_state["flights"]) == 3
    assert all(f.outbound.stops == 0 for f in app.session_state["flights"])


def test_filter_change_returns_to_first_page(app):
    app.button(key="page-2").click().run()
    assert app.session_state["page"] == 2

    app.multiselect(key="filter_airlines").set_value(["BA", "AA", "DL", "UA"]).run()
    assert app.session_state["page"] == 1

    app.button(key="page-2").click().run()
    app.slider(key="filter_max_price").set_value(600.0).run()
    assert app.session_state["page"] == 1
