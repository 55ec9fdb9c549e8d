# src/skybound/providers/amadeus_provider.py

from __future__ import annotations

import logging
from typing import List, Optional

from skybound.core.constants import FETCH_LIMIT
from skybound.core.models import FilterState, LocationSuggestion, NormalizedFlight, SearchCriteria
from skybound.core.normalize import normalize_flight_offers
from skybound.providers.base import FlightSearchProvider, pushdown_filters
from skybound.services.amadeus_client import AmadeusClient

logger = logging.getLogger(__name__)


class AmadeusProvider(FlightSearchProvider):
    """
    Live provider (Amadeus Self-Service Flight Offers Search).
    """

    name = "amadeus"

    def __init__(
        self,
        client: Optional[AmadeusClient] = None,
        max_results: int = FETCH_LIMIT,
        currency: str = "USD",
    ):
        self.client = client or AmadeusClient()
        self.max_results = max_results
        self.currency = currency

    def search(self, criteria: SearchCriteria, filters: Optional[FilterState] = None) -> List[NormalizedFlight]:
        filters = pushdown_filters(filters)
        payload = self.client.search_flight_offers(
            criteria, filters, limit=self.max_results, currency=self.currency)

        data = payload.get("data", []) or []

        dictionaries = payload.get("dictionaries", {}) or {}
        carriers_dict = dictionaries.get("carriers", {}) or {}

        flights = normalize_flight_offers(data, carriers_dict)
        logger.info(
            "Amadeus returned %d offers for %s-%s on %s (%d usable)",
            len(data), criteria.origin, criteria.destination,
            criteria.departure_date, len(flights),
        )
        return flights

    def search_locations(self, keyword: str) -> List[LocationSuggestion]:
        return self.client.search_locations(keyword)
