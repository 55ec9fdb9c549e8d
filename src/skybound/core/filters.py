# src/skybound/core/filters.py

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, List

from skybound.core.models import FilterState, FlightLeg, NormalizedFlight, SortOption

MAX_STOP_BUCKET = 2  # "2+ stops"


def _clamped_stops(leg: FlightLeg) -> int:
    return min(leg.stops, MAX_STOP_BUCKET)


def stop_bucket(flight: NormalizedFlight) -> int:
    """
    Stop bucket used by the stops filter.
    Round trips are classified by their worse leg.
    """
    outbound = _clamped_stops(flight.outbound)
    if flight.return_leg is None:
        return outbound
    return max(outbound, _clamped_stops(flight.return_leg))


def _stop_match(flight: NormalizedFlight, state: FilterState) -> bool:
    return not state.stops or stop_bucket(flight) in state.stops


def _airline_match(flight: NormalizedFlight, state: FilterState) -> bool:
    if not state.airlines:
        return True
    # Either leg flown by an allowed carrier is enough.
    return any(code in state.airlines for code in flight.carrier_codes)


def _price_match(flight: NormalizedFlight, state: FilterState) -> bool:
    return flight.price <= state.max_price


def _duration_match(flight: NormalizedFlight, state: FilterState) -> bool:
    # Outbound leg only, even on round trips.
    if state.duration_range is None:
        return True
    return state.duration_range.contains(flight.outbound.duration_minutes)


def matches_filters(flight: NormalizedFlight, state: FilterState) -> bool:
    return (
        _stop_match(flight, state)
        and _airline_match(flight, state)
        and _price_match(flight, state)
        and _duration_match(flight, state)
    )


def filter_flights(flights: Iterable[NormalizedFlight], state: FilterState) -> List[NormalizedFlight]:
    return [f for f in flights if matches_filters(f, state)]


def _parse_instant(value: str) -> datetime:
    """
    Parse ISO timestamps like '2026-02-15T10:30:00', '...Z' or '...+02:00'.
    Naive values are taken as UTC; unparseable ones sort last.
    """
    try:
        dt = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return datetime.max.replace(tzinfo=timezone.utc)
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def sort_flights(flights: Iterable[NormalizedFlight], sort_by: SortOption) -> List[NormalizedFlight]:
    """Return a new, stably sorted list; ties keep their input order."""
    if sort_by is SortOption.PRICE_ASC:
        return sorted(flights, key=lambda f: f.price)
    if sort_by is SortOption.DURATION_ASC:
        return sorted(flights, key=lambda f: f.outbound.duration_minutes)
    if sort_by is SortOption.DEPARTURE_ASC:
        return sorted(flights, key=lambda f: _parse_instant(f.outbound.departure_time))
    return list(flights)
