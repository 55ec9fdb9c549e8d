from unittest.mock import Mock

import pytest

from factories import make_raw_offer
from skybound.core.models import DurationRange, FilterState, LocationSuggestion, SearchCriteria
from skybound.providers.amadeus_provider import AmadeusProvider
from skybound.providers.base import ProviderError, pushdown_filters
from skybound.providers.factory import get_provider
from skybound.providers.mock_provider import MockProvider, generate_dummy_offers
from skybound.settings import AppSettings


@pytest.fixture
def one_way():
    return SearchCriteria(origin="JFK", destination="LHR", departure_date="2026-05-01")


@pytest.fixture
def round_trip():
    return SearchCriteria(origin="JFK", destination="LHR", departure_date="2026-05-01", return_date="2026-05-08")


def test_amadeus_provider_normalizes_payload(one_way, round_trip_offer):
    client = Mock()
    client.search_flight_offers.return_value = {
        "data": [make_raw_offer("1"), round_trip_offer, make_raw_offer("broken", total="")],
        "dictionaries": {"carriers": {"AA": "AMERICAN AIRLINES"}},
    }
    provider = AmadeusProvider(client, max_results=25)

    flights = provider.search(one_way, FilterState(stops={0}))

    assert [f.id for f in flights] == ["1", "rt-1"]
    assert flights[1].outbound.airline_name == "AMERICAN AIRLINES"
    client.search_flight_offers.assert_called_once_with(
        one_way, FilterState(stops={0}), limit=25, currency="USD")


def test_dummy_offers_are_amadeus_shaped(round_trip):
    offers = generate_dummy_offers(round_trip)

    assert len(offers) == 8
    for offer in offers:
        assert len(offer["itineraries"]) == 2
        assert float(offer["price"]["total"]) > 0
        assert offer["itineraries"][0]["segments"][0]["departure"]["iataCode"] == "JFK"
        assert offer["itineraries"][0]["segments"][-1]["arrival"]["iataCode"] == "LHR"
        assert offer["itineraries"][1]["segments"][0]["departure"]["iataCode"] == "LHR"


def test_mock_provider_is_deterministic(one_way):
    first = MockProvider().search(one_way)
    second = MockProvider().search(one_way)

    assert first == second
    assert all(f.return_leg is None for f in first)
    assert {f.outbound.stops for f in first} == {0, 1, 2}
    assert all(f.outbound.duration_minutes > 0 for f in first)


def test_mock_provider_round_trip_and_pushed_down_filters(round_trip):
    flights = MockProvider().search(round_trip, FilterState(stops={0}))
    assert flights
    assert all(f.outbound.stops == 0 and f.return_leg.stops == 0 for f in flights)

    flights = MockProvider().search(round_trip, FilterState(airlines={"BA"}))
    assert [f.outbound.airline_code for f in flights] == ["BA"]


def test_mock_provider_validates_criteria():
    with pytest.raises(ValueError):
        MockProvider().search(SearchCriteria(origin="jfk", destination="LHR", departure_date="2026-05-01"))


def test_get_provider():
    settings = AppSettings(amadeus_client_id="id", amadeus_client_secret="secret", fetch_limit=40)

    assert isinstance(get_provider("mock", settings), MockProvider)

    amadeus = get_provider("amadeus", settings)
    assert isinstance(amadeus, AmadeusProvider)
    assert amadeus.max_results == 40

    with pytest.raises(ProviderError):
        get_provider("kiwi", settings)


def test_pushdown_filters_keeps_only_upstream_fields():
    filters = FilterState(stops={0}, airlines={"BA"}, max_price=300, duration_range=DurationRange(60, 120))

    assert pushdown_filters(filters) == FilterState(stops={0}, airlines={"BA"})
    assert pushdown_filters(filters.replace(max_price=50)) == pushdown_filters(filters)
    assert pushdown_filters(None) == FilterState()


def test_amadeus_provider_pushes_only_upstream_filters(one_way):
    client = Mock()
    client.search_flight_offers.return_value = {"data": []}

    AmadeusProvider(client, max_results=10).search(one_way, FilterState(airlines={"BA"}, max_price=100))

    client.search_flight_offers.assert_called_once_with(
        one_way, FilterState(airlines={"BA"}), limit=10, currency="USD")


def test_amadeus_provider_location_lookup_delegates_to_client():
    client = Mock()
    jfk = LocationSuggestion("JOHN F KENNEDY INTL", "JFK", city_name="NEW YORK")
    client.search_locations.return_value = [jfk]

    assert AmadeusProvider(client).search_locations("new") == [jfk]
    client.search_locations.assert_called_once_with("new")


def test_mock_provider_location_lookup():
    provider = MockProvider()

    assert [loc.iata_code for loc in provider.search_locations("lh")] == ["LHR"]
    assert [loc.iata_code for loc in provider.search_locations("new york")] == ["JFK", "LGA"]
    assert provider.search_locations("j") == []
    assert provider.search_locations("zz") == []
