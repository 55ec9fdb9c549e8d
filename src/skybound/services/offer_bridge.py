# src/skybound/services/offer_bridge.py

from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from skybound.core.models import ChartBucket, FlightLeg, GuidanceResult, NormalizedFlight

FLIGHT_COLUMNS = [
    "id", "badges", "price", "currency",
    "airline", "departure", "arrival", "duration", "stops",
    "return_airline", "return_departure", "return_duration", "return_stops",
]


def _leg_fields(leg: Optional[FlightLeg], prefix: str = "") -> Dict[str, Any]:
    if leg is None:
        return {
            f"{prefix}airline": None,
            f"{prefix}departure": None,
            f"{prefix}duration": None,
            f"{prefix}stops": None,
        }
    return {
        f"{prefix}airline": leg.airline_name,
        f"{prefix}departure": leg.departure_time,
        f"{prefix}duration": leg.duration,
        f"{prefix}stops": leg.stops,
    }


def flights_to_rows(
    flights: Sequence[NormalizedFlight],
    guidance: Optional[GuidanceResult] = None,
) -> List[Dict[str, Any]]:
    rows: List[Dict[str, Any]] = []

    for f in flights:
        d: Dict[str, Any] = {
            "id": f.id,
            "badges": " ".join(guidance.badges_for(f.id)) if guidance else "",
            "price": f.price,
            "currency": f.currency,
            "arrival": f.outbound.arrival_time,
        }
        d.update(_leg_fields(f.outbound))
        d.update(_leg_fields(f.return_leg, prefix="return_"))
        rows.append(d)

    return rows


def flights_to_dataframe(
    flights: Sequence[NormalizedFlight],
    guidance: Optional[GuidanceResult] = None,
) -> pd.DataFrame:
    return pd.DataFrame(flights_to_rows(flights, guidance), columns=FLIGHT_COLUMNS)


def chart_to_dataframe(chart: Sequence[ChartBucket]) -> pd.DataFrame:
    """
    Histogram buckets indexed by label, ready for st.bar_chart.
    """
    df = pd.DataFrame(
        [
            {
                "bucket": b.name,
                "avg_price": b.avg,
                "min_price": b.min_price,
                "max_price": b.max_price,
                "count": b.count,
                "min_minutes": b.min_minutes,
                "max_minutes": b.max_minutes,
            }
            for b in chart
        ],
        columns=["bucket", "avg_price", "min_price", "max_price", "count", "min_minutes", "max_minutes"],
    )
    return df.set_index("bucket")


def comparison_dataframe(flights: Sequence[NormalizedFlight]) -> pd.DataFrame:
    """One column per compared flight, one row per attribute."""
    rows = flights_to_rows(flights)
    if not rows:
        return pd.DataFrame()
    return pd.DataFrame(rows, columns=FLIGHT_COLUMNS).set_index("id").drop(columns=["badges"]).T
