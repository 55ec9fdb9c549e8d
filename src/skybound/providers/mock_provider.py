# src/skybound/providers/mock_provider.py

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Sequence, Tuple

from skybound.core.models import FilterState, LocationSuggestion, NormalizedFlight, SearchCriteria
from skybound.core.normalize import normalize_flight_offers
from skybound.providers.base import FlightSearchProvider

# (carrier, base price, departure hour, per-segment block minutes, outbound stops, return stops)
_TEMPLATES: List[Tuple[str, float, int, Sequence[int], int, int]] = [
    ("BA", 612.40, 8, (420,), 0, 0),
    ("AA", 548.10, 10, (180, 250), 1, 0),
    ("DL", 505.75, 13, (150, 140, 200), 2, 1),
    ("UA", 579.00, 17, (430,), 0, 1),
    ("LH", 489.30, 6, (95, 480), 1, 1),
    ("AF", 455.60, 21, (110, 120, 390), 2, 2),
    ("B6", 432.00, 15, (445,), 0, 0),
    ("IB", 468.25, 19, (140, 430), 1, 2),
]

LAYOVER_MINUTES = 75

_LOCATIONS: List[LocationSuggestion] = [
    LocationSuggestion("JOHN F KENNEDY INTL", "JFK", "NEW YORK/US:JOHN F KENNEDY INTL", "AIRPORT", "NEW YORK", "UNITED STATES OF AMERICA"),
    LocationSuggestion("LAGUARDIA", "LGA", "NEW YORK/US:LAGUARDIA", "AIRPORT", "NEW YORK", "UNITED STATES OF AMERICA"),
    LocationSuggestion("O HARE INTERNATIONAL", "ORD", "CHICAGO/US:O HARE INTERNATIONAL", "AIRPORT", "CHICAGO", "UNITED STATES OF AMERICA"),
    LocationSuggestion("LOS ANGELES INTL", "LAX", "LOS ANGELES/US:LOS ANGELES INTL", "AIRPORT", "LOS ANGELES", "UNITED STATES OF AMERICA"),
    LocationSuggestion("HEATHROW", "LHR", "LONDON/GB:HEATHROW", "AIRPORT", "LONDON", "UNITED KINGDOM"),
    LocationSuggestion("CHARLES DE GAULLE", "CDG", "PARIS/FR:CHARLES DE GAULLE", "AIRPORT", "PARIS", "FRANCE"),
    LocationSuggestion("ADOLFO SUAREZ BARAJAS", "MAD", "MADRID/ES:ADOLFO SUAREZ BARAJAS", "AIRPORT", "MADRID", "SPAIN"),
    LocationSuggestion("FRANKFURT INTL", "FRA", "FRANKFURT/DE:FRANKFURT INTL", "AIRPORT", "FRANKFURT", "GERMANY"),
    LocationSuggestion("SCHIPHOL", "AMS", "AMSTERDAM/NL:SCHIPHOL", "AIRPORT", "AMSTERDAM", "NETHERLANDS"),
]


def _iso(dt: datetime) -> str:
    return dt.strftime("%Y-%m-%dT%H:%M:%S")


def _iso_duration(minutes: int) -> str:
    hours, mins = divmod(minutes, 60)
    out = "PT"
    if hours:
        out += f"{hours}H"
    if mins:
        out += f"{mins}M"
    return out


def _itinerary(
    origin: str,
    destination: str,
    start: datetime,
    carrier: str,
    blocks: Sequence[int],
) -> Dict[str, Any]:
    hubs = ["FRA", "AMS", "MAD", "IST"]
    stops = [origin] + hubs[: len(blocks) - 1] + [destination]

    segments: List[Dict[str, Any]] = []
    at = start
    for idx, block in enumerate(blocks):
        arrive = at + timedelta(minutes=block)
        segments.append(
            {
                "departure": {"iataCode": stops[idx], "at": _iso(at)},
                "arrival": {"iataCode": stops[idx + 1], "at": _iso(arrive)},
                "carrierCode": carrier,
                "numberOfStops": 0,
            }
        )
        at = arrive + timedelta(minutes=LAYOVER_MINUTES)

    total = sum(blocks) + LAYOVER_MINUTES * (len(blocks) - 1)
    return {"duration": _iso_duration(total), "segments": segments}


def _blocks_for(blocks: Sequence[int], stops: int) -> Sequence[int]:
    if len(blocks) == stops + 1:
        return blocks
    # Re-split the same total block time over the requested number of segments.
    total = sum(blocks)
    size = total // (stops + 1)
    return [size] * stops + [total - size * stops]


def generate_dummy_offers(criteria: SearchCriteria) -> List[Dict[str, Any]]:
    """
    Deterministic Amadeus-shaped offers for offline development.
    Round trips get a return itinerary on the requested return date.
    """
    departure_day = datetime.fromisoformat(criteria.departure_date)
    return_day = datetime.fromisoformat(criteria.return_date) if criteria.return_date else None

    offers: List[Dict[str, Any]] = []
    for idx, (carrier, price, hour, blocks, out_stops, ret_stops) in enumerate(_TEMPLATES, start=1):
        itineraries = [
            _itinerary(
                criteria.origin,
                criteria.destination,
                departure_day.replace(hour=hour),
                carrier,
                _blocks_for(blocks, out_stops),
            )
        ]
        total = price * max(1, int(criteria.passengers))
        if return_day is not None:
            itineraries.append(
                _itinerary(
                    criteria.destination,
                    criteria.origin,
                    return_day.replace(hour=(hour + 5) % 24),
                    carrier,
                    _blocks_for(blocks, ret_stops),
                )
            )
            total *= 1.8

        offers.append(
            {
                "id": str(idx),
                "itineraries": itineraries,
                "price": {"total": f"{total:.2f}", "currency": "USD"},
                "validatingAirlineCodes": [carrier],
            }
        )
    return offers


class MockProvider(FlightSearchProvider):
    """
    Deterministic offline provider for dev/testing.
    Generates raw offers and runs them through the regular normalizer.
    """

    name = "mock"

    def search(self, criteria: SearchCriteria, filters: Optional[FilterState] = None) -> List[NormalizedFlight]:
        criteria.validate()
        offers = generate_dummy_offers(criteria)

        # Mirror what the live API does with pushed-down filters.
        if filters is not None and filters.stops == frozenset({0}):
            offers = [o for o in offers if all(len(it["segments"]) == 1 for it in o["itineraries"])]
        if filters is not None and filters.airlines:
            offers = [o for o in offers if o["validatingAirlineCodes"][0] in filters.airlines]

        return normalize_flight_offers(offers)

    def search_locations(self, keyword: str) -> List[LocationSuggestion]:
        keyword = (keyword or "").strip().upper()
        if len(keyword) < 2:
            return []
        return [
            loc for loc in _LOCATIONS
            if loc.iata_code.startswith(keyword) or keyword in (loc.city_name or "")
        ]
