from typing import Any, Dict, List

import pytest

from factories import make_flight, make_raw_offer, make_segment
from skybound.core.models import NormalizedFlight


@pytest.fixture
def round_trip_offer() -> Dict[str, Any]:
    return make_raw_offer(
        "rt-1",
        total="899.99",
        validating=("AA",),
        itineraries=[
            {
                "duration": "PT9H25M",
                "segments": [
                    make_segment("JFK", "ORD", "2026-05-01T08:00:00", "2026-05-01T10:15:00", carrier=None),
                    make_segment("ORD", "LHR", "2026-05-01T11:30:00", "2026-05-02T01:25:00", carrier="BA"),
                ],
            },
            {
                "duration": "PT8H",
                "segments": [
                    make_segment("LHR", "JFK", "2026-05-08T12:00:00", "2026-05-08T15:00:00", carrier="UA"),
                ],
            },
        ],
    )


@pytest.fixture
def scenario_a() -> List[NormalizedFlight]:
    return [
        make_flight("f1", price=500, minutes=300),
        make_flight("f2", price=420, minutes=360),
        make_flight("f3", price=420, minutes=240),
    ]
