# src/skybound/providers/base.py

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from skybound.core.models import FilterState, LocationSuggestion, NormalizedFlight, SearchCriteria


class ProviderError(Exception):
    """Upstream search failed (transport, auth or a non-2xx response)."""

    def __init__(self, message: str, status_code: int = 502, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.status_code = status_code
        self.details = details or {}


def pushdown_filters(filters: Optional[FilterState]) -> FilterState:
    """
    The part of the filter state a provider can apply upstream (stops and carriers).
    A change here means the search has to be re-run; other fields are local only.
    """
    if filters is None:
        return FilterState()
    return FilterState(stops=filters.stops, airlines=filters.airlines)


class FlightSearchProvider(ABC):

    name: str = "base"

    @abstractmethod
    def search(self, criteria: SearchCriteria, filters: Optional[FilterState] = None) -> List[NormalizedFlight]:
        ...

    @abstractmethod
    def search_locations(self, keyword: str) -> List[LocationSuggestion]:
        ...
