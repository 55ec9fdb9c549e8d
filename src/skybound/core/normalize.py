# src/skybound/core/normalize.py

from __future__ import annotations

import logging
import math
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional

from skybound.core.constants import AIRLINE_NAMES
from skybound.core.models import FlightLeg, NormalizedFlight

logger = logging.getLogger(__name__)

DURATION_RE = re.compile(r"PT(?:(\d+)H)?(?:(\d+)M)?")


class MalformedOfferError(ValueError):
    """Raised when a raw offer is missing data the normalizer cannot do without."""

    def __init__(self, message: str, offer_id: Optional[str] = None):
        super().__init__(message)
        self.offer_id = offer_id


def parse_duration(value: Any) -> int:
    """
    Parse durations like 'PT6H30M' into total minutes.
    Anything that does not look like a duration counts as 0.
    """
    if not value or not isinstance(value, str):
        return 0
    match = DURATION_RE.search(value)
    if not match:
        return 0
    hours = int(match.group(1) or 0)
    minutes = int(match.group(2) or 0)
    return hours * 60 + minutes


def format_duration(value: Any) -> str:
    """'PT2H30M' -> '2h30m'."""
    if not value or not isinstance(value, str):
        return ""
    return value.replace("PT", "", 1).lower()


def resolve_airline_name(code: str, carriers: Optional[Mapping[str, str]] = None) -> str:
    if carriers and carriers.get(code):
        return str(carriers[code])
    return AIRLINE_NAMES.get(code) or code


def _parse_price(offer: Dict[str, Any], offer_id: str) -> float:
    price = offer.get("price", {}) or {}
    total = price.get("total")
    try:
        value = float(total)
    except (TypeError, ValueError):
        raise MalformedOfferError(f"Unparseable price {total!r}", offer_id) from None
    if not math.isfinite(value) or value < 0:
        raise MalformedOfferError(f"Invalid price {total!r}", offer_id)
    return value


def _validating_airline_code(offer: Dict[str, Any]) -> str:
    vac = offer.get("validatingAirlineCodes")
    if isinstance(vac, list) and vac:
        return str(vac[0])
    return ""


def _build_leg(
    itinerary: Dict[str, Any],
    fallback_airline: str,
    carriers: Optional[Mapping[str, str]],
    offer_id: str,
) -> FlightLeg:
    segments = itinerary.get("segments", []) or []
    if not segments:
        raise MalformedOfferError("Itinerary has no segments", offer_id)

    first = segments[0] or {}
    last = segments[-1] or {}
    dep = first.get("departure", {}) or {}
    arr = last.get("arrival", {}) or {}

    airline_code = str(first.get("carrierCode") or fallback_airline)
    if not airline_code:
        raise MalformedOfferError("No carrier code for itinerary", offer_id)

    duration = itinerary.get("duration")

    return FlightLeg(
        airline_code=airline_code,
        airline_name=resolve_airline_name(airline_code, carriers),
        departure_time=str(dep.get("at", "")),
        arrival_time=str(arr.get("at", "")),
        duration=format_duration(duration),
        duration_minutes=parse_duration(duration),
        stops=len(segments) - 1,
        origin=str(dep.get("iataCode", "")),
        destination=str(arr.get("iataCode", "")),
    )


def normalize_flight_offer(
    offer: Dict[str, Any],
    carriers: Optional[Mapping[str, str]] = None,
) -> NormalizedFlight:
    """
    Convert one Amadeus flight-offer dict into a NormalizedFlight.

    The first itinerary is the outbound leg, a second one (if any) the return leg.
    Raises MalformedOfferError instead of guessing when the offer is incomplete.
    """
    offer_id = str(offer.get("id", ""))
    itineraries = offer.get("itineraries", []) or []
    if not itineraries:
        raise MalformedOfferError("Offer has no itineraries", offer_id)

    fallback_airline = _validating_airline_code(offer)
    price = _parse_price(offer, offer_id)

    outbound = _build_leg(itineraries[0], fallback_airline, carriers, offer_id)
    return_leg = None
    if len(itineraries) > 1:
        return_leg = _build_leg(itineraries[1], fallback_airline, carriers, offer_id)

    return NormalizedFlight(
        id=offer_id,
        price=price,
        currency=str((offer.get("price", {}) or {}).get("currency", "")),
        outbound=outbound,
        return_leg=return_leg,
    )


def normalize_flight_offers(
    offers: Iterable[Dict[str, Any]],
    carriers: Optional[Mapping[str, str]] = None,
) -> List[NormalizedFlight]:
    """
    Normalize a batch of raw offers, keeping input order.

    Malformed offers are skipped (and logged) so one broken record does not
    cost the whole result set.
    """
    flights: List[NormalizedFlight] = []
    skipped = 0
    for offer in offers:
        try:
            flights.append(normalize_flight_offer(offer, carriers))
        except MalformedOfferError as exc:
            skipped += 1
            logger.warning("Skipping offer %r: %s", exc.offer_id, exc)

    logger.debug("Normalized %d offers (%d skipped)", len(flights), skipped)
    return flights
