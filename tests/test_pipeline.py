import pytest

from factories import make_flight, make_leg
from skybound.core.constants import INITIAL_MAX_PRICE
from skybound.core.models import DurationRange, FilterState, SortOption
from skybound.core.pagination import page_window, paginate, total_pages
from skybound.core.pipeline import build_results_view


@pytest.fixture
def flights():
    return [
        make_flight("a", price=510.2, minutes=200, carrier="BA"),
        make_flight("b", price=320.0, minutes=420, carrier="AA", return_leg=make_leg(carrier="DL")),
        make_flight("c", price=410.0, minutes=260, carrier="BA"),
    ]


def test_results_view_wires_filter_sort_chart_and_guidance(flights):
    view = build_results_view(flights, FilterState(), SortOption.PRICE_ASC)

    assert [f.id for f in view.flights] == ["b", "c", "a"]
    assert sum(b.count for b in view.chart) == 3
    assert view.guidance.cheapest_id == "b"
    assert view.guidance.fastest_id == "a"
    assert view.available_airlines == ["AA", "BA", "DL"]
    assert view.max_possible_price == 511


def test_chart_ignores_duration_range(flights):
    state = FilterState(duration_range=DurationRange(400, 500))
    view = build_results_view(flights, state, SortOption.DURATION_ASC)

    assert [f.id for f in view.flights] == ["b"]
    assert sum(b.count for b in view.chart) == 3
    assert view.guidance.best_value_id == "b"


def test_chart_still_respects_other_filters(flights):
    view = build_results_view(flights, FilterState(airlines={"BA"}))
    assert sum(b.count for b in view.chart) == 2


def test_empty_results_view():
    view = build_results_view([], FilterState())
    assert view.flights == []
    assert view.chart == []
    assert view.guidance.cheapest_id is None
    assert view.max_possible_price == INITIAL_MAX_PRICE


def test_paginate_clamps_page():
    items = list(range(20))
    assert total_pages(20, 8) == 3

    first = paginate(items, 1, 8)
    assert first.items == list(range(8))
    assert not first.has_previous and first.has_next

    last = paginate(items, 99, 8)
    assert last.page == 3
    assert last.items == [16, 17, 18, 19]

    empty = paginate([], 3, 8)
    assert empty.items == [] and empty.page == 1 and empty.total_pages == 0


def test_page_window():
    assert page_window(1, 3) == [1, 2, 3]
    assert page_window(5, 10) == [3, 4, 5, 6, 7]
    assert page_window(10, 10) == [6, 7, 8, 9, 10]
    assert page_window(1, 0) == []
