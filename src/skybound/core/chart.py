# src/skybound/core/chart.py

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Sequence

from skybound.core.models import ChartBucket, NormalizedFlight

BUCKET_COUNT = 7
MIN_BUCKET_MINUTES = 30


@dataclass
class _BucketAccumulator:
    start: int
    prices: List[float] = field(default_factory=list)


def bucket_size_for(min_minutes: int, max_minutes: int) -> int:
    """
    Width of each histogram bucket.
    Spreads the observed range over BUCKET_COUNT - 1 steps, never narrower than 30 minutes.
    """
    return max(MIN_BUCKET_MINUTES, math.ceil((max_minutes - min_minutes) / (BUCKET_COUNT - 1)))


def bucket_label(start_minutes: int) -> str:
    """240 -> '4h', 270 -> '4h30m'."""
    hours, minutes = divmod(start_minutes, 60)
    if minutes:
        return f"{hours}h{minutes}m"
    return f"{hours}h"


def _bucket_index(duration: int, starts: Sequence[int]) -> int:
    # Greatest start not exceeding the duration; starts[0] is the minimum duration.
    for idx in range(len(starts) - 1, -1, -1):
        if duration >= starts[idx]:
            return idx
    return 0


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def build_chart_data(flights: Sequence[NormalizedFlight]) -> List[ChartBucket]:
    """
    Histogram of average price by outbound duration.

    Returns only the non-empty buckets, so consumers must not assume
    BUCKET_COUNT contiguous entries.
    """
    if not flights:
        return []

    durations = [f.outbound.duration_minutes for f in flights]
    min_dur = min(durations)
    max_dur = max(durations)
    size = bucket_size_for(min_dur, max_dur)

    buckets = [_BucketAccumulator(start=min_dur + i * size) for i in range(BUCKET_COUNT)]
    starts = [b.start for b in buckets]

    for flight in flights:
        idx = _bucket_index(flight.outbound.duration_minutes, starts)
        buckets[idx].prices.append(flight.price)

    chart: List[ChartBucket] = []
    for bucket in buckets:
        if not bucket.prices:
            continue
        chart.append(
            ChartBucket(
                name=bucket_label(bucket.start),
                min_minutes=bucket.start,
                max_minutes=bucket.start + size,
                avg=_round_half_up(sum(bucket.prices) / len(bucket.prices)),
                min_price=min(bucket.prices),
                max_price=max(bucket.prices),
                count=len(bucket.prices),
            )
        )
    return chart
