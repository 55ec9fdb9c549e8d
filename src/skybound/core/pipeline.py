# src/skybound/core/pipeline.py

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Sequence

from skybound.core.chart import build_chart_data
from skybound.core.constants import INITIAL_MAX_PRICE
from skybound.core.filters import filter_flights, sort_flights
from skybound.core.guidance import compute_guidance
from skybound.core.models import (
    ChartBucket,
    FilterState,
    GuidanceResult,
    NormalizedFlight,
    SortOption,
)


@dataclass(frozen=True)
class ResultsView:
    """Everything the results screen needs for one (flights, filters, sort) input."""

    flights: List[NormalizedFlight] = field(default_factory=list)
    chart: List[ChartBucket] = field(default_factory=list)
    guidance: GuidanceResult = field(default_factory=GuidanceResult)
    available_airlines: List[str] = field(default_factory=list)
    max_possible_price: float = INITIAL_MAX_PRICE


def available_airlines(flights: Sequence[NormalizedFlight]) -> List[str]:
    codes = {code for f in flights for code in f.carrier_codes if code}
    return sorted(codes)


def max_possible_price(flights: Sequence[NormalizedFlight]) -> float:
    if not flights:
        return INITIAL_MAX_PRICE
    return float(math.ceil(max(f.price for f in flights)))


def build_results_view(
    flights: Sequence[NormalizedFlight],
    filters: FilterState,
    sort_by: SortOption = SortOption.PRICE_ASC,
) -> ResultsView:
    processed = sort_flights(filter_flights(flights, filters), sort_by)

    # The histogram ignores the duration window so a selected bar does not hide its neighbours.
    chart_context = filter_flights(flights, filters.replace(duration_range=None))

    return ResultsView(
        flights=processed,
        chart=build_chart_data(chart_context),
        guidance=compute_guidance(processed),
        available_airlines=available_airlines(flights),
        max_possible_price=max_possible_price(flights),
    )
