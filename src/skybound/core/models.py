# src/skybound/core/models.py

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import FrozenSet, List, Optional, Tuple

IATA_CODE_RE = re.compile(r"^[A-Z]{3}$")


@dataclass(frozen=True)
class SearchCriteria:
    origin: str
    destination: str
    departure_date: str  # "YYYY-MM-DD"
    return_date: Optional[str] = None
    passengers: int = 1

    @property
    def is_round_trip(self) -> bool:
        return bool(self.return_date)

    def validate(self) -> None:
        if not IATA_CODE_RE.match(self.origin or "") or not IATA_CODE_RE.match(self.destination or ""):
            raise ValueError("Please select valid locations from the suggestions.")
        if int(self.passengers) < 1:
            raise ValueError("At least one passenger is required.")


@dataclass(frozen=True)
class FlightLeg:
    """One direction of travel, summarised from its segments."""

    airline_code: str
    airline_name: str
    departure_time: str  # ISO instant of the first segment
    arrival_time: str  # ISO instant of the last segment
    duration: str  # e.g. "2h30m"
    duration_minutes: int
    stops: int
    origin: str
    destination: str


@dataclass(frozen=True)
class NormalizedFlight:
    """Canonical flight record used by filtering, sorting, charting and guidance."""

    id: str
    price: float
    currency: str
    outbound: FlightLeg
    return_leg: Optional[FlightLeg] = None

    @property
    def is_round_trip(self) -> bool:
        return self.return_leg is not None

    @property
    def carrier_codes(self) -> Tuple[str, ...]:
        if self.return_leg is None:
            return (self.outbound.airline_code,)
        return (self.outbound.airline_code, self.return_leg.airline_code)


@dataclass(frozen=True)
class DurationRange:
    """Half-open outbound duration window [min_minutes, max_minutes)."""

    min_minutes: int
    max_minutes: int

    def contains(self, minutes: int) -> bool:
        return self.min_minutes <= minutes < self.max_minutes


@dataclass(frozen=True)
class FilterState:
    # Empty sets mean "no restriction" on that dimension.
    stops: FrozenSet[int] = field(default_factory=frozenset)
    airlines: FrozenSet[str] = field(default_factory=frozenset)
    max_price: float = math.inf
    duration_range: Optional[DurationRange] = None

    def __post_init__(self):
        # Accept lists/sets from callers but keep the state hashable.
        object.__setattr__(self, "stops", frozenset(self.stops))
        object.__setattr__(self, "airlines", frozenset(self.airlines))

    def replace(self, **changes) -> "FilterState":
        return replace(self, **changes)


class SortOption(Enum):
    PRICE_ASC = "Price (Lowest)"
    DURATION_ASC = "Duration (Shortest)"
    DEPARTURE_ASC = "Departure (Earliest)"

    @property
    def label(self) -> str:
        return self.value


@dataclass(frozen=True)
class ChartBucket:
    name: str
    min_minutes: int
    max_minutes: int
    avg: int
    min_price: float
    max_price: float
    count: int

    def to_duration_range(self) -> DurationRange:
        """Turn a selected histogram bar back into a filter value."""
        return DurationRange(self.min_minutes, self.max_minutes)


@dataclass(frozen=True)
class GuidanceResult:
    cheapest_id: Optional[str] = None
    fastest_id: Optional[str] = None
    best_value_id: Optional[str] = None

    def badges_for(self, flight_id: str) -> List[str]:
        badges: List[str] = []
        if flight_id == self.best_value_id:
            badges.append("Best")
        if flight_id == self.fastest_id:
            badges.append("Fast")
        if flight_id == self.cheapest_id:
            badges.append("Cheap")
        return badges


@dataclass(frozen=True)
class LocationSuggestion:
    """City or airport returned by the provider's location autocomplete."""

    name: str
    iata_code: str
    detailed_name: str = ""
    sub_type: str = ""
    city_name: str = ""
    country_name: str = ""

    @property
    def label(self) -> str:
        place = ", ".join(p for p in (self.city_name, self.country_name) if p)
        return f"{self.iata_code} — {place or self.name}"
