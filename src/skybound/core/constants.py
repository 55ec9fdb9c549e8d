# src/skybound/core/constants.py

from typing import Dict

from skybound.core.models import FilterState

AIRLINE_NAMES: Dict[str, str] = {
    "AA": "American Airlines",
    "DL": "Delta Air Lines",
    "UA": "United Airlines",
    "LH": "Lufthansa",
    "AF": "Air France",
    "BA": "British Airways",
    "EK": "Emirates",
    "QR": "Qatar Airways",
    "SQ": "Singapore Airlines",
    "IB": "Iberia",
    "VY": "Vueling",
    "FR": "Ryanair",
    "EZY": "EasyJet",
    "TK": "Turkish Airlines",
    "B6": "JetBlue",
    "WN": "Southwest Airlines",
    "AC": "Air Canada",
    "LX": "Swiss International",
}

# Sidebar defaults: the slider starts at 2000 rather than "unbounded".
INITIAL_MAX_PRICE = 2000.0
INITIAL_FILTERS = FilterState(max_price=INITIAL_MAX_PRICE)

ITEMS_PER_PAGE = 8
FETCH_LIMIT = 100
MAX_COMPARED_FLIGHTS = 2
