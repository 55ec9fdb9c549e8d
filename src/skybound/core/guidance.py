# src/skybound/core/guidance.py

from __future__ import annotations

from itertools import islice
from typing import List, Optional, Sequence

from skybound.core.models import GuidanceResult, NormalizedFlight


def value_score(flight: NormalizedFlight) -> float:
    """
    Cost per hour of outbound travel. Lower is better.
    """
    return flight.price * (flight.outbound.duration_minutes / 60)


def compute_guidance(flights: Sequence[NormalizedFlight]) -> GuidanceResult:
    """
    Single pass over the collection picking the cheapest, fastest and
    best-value flight. Strict comparisons: the first of tied flights wins.
    """
    if not flights:
        return GuidanceResult()

    cheapest = fastest = best_value = flights[0]
    best_score = value_score(best_value)

    for flight in islice(flights, 1, None):
        if flight.price < cheapest.price:
            cheapest = flight
        if flight.outbound.duration_minutes < fastest.outbound.duration_minutes:
            fastest = flight
        score = value_score(flight)
        if score < best_score:
            best_value = flight
            best_score = score

    return GuidanceResult(
        cheapest_id=cheapest.id,
        fastest_id=fastest.id,
        best_value_id=best_value.id,
    )


def compare_flights(
    flights: Sequence[NormalizedFlight],
    selected_ids: Sequence[str],
    limit: int = 2,
) -> List[NormalizedFlight]:
    """Flights picked for side-by-side comparison, in selection order."""
    by_id = {f.id: f for f in flights}
    picked: List[NormalizedFlight] = []
    for flight_id in selected_ids:
        flight: Optional[NormalizedFlight] = by_id.get(flight_id)
        if flight is not None and flight not in picked:
            picked.append(flight)
        if len(picked) >= limit:
            break
    return picked


def format_flight_label(flight: NormalizedFlight) -> str:
    """
    Human-readable label for UI.
    Prefer airline name if available.
    """
    leg = flight.outbound
    airline = leg.airline_name or leg.airline_code or "Unknown airline"
    trip = "Roundtrip" if flight.is_round_trip else "One-way"
    return f"{trip} · {airline} · {leg.origin} → {leg.destination}"
