# src/skybound/services/amadeus_client.py

from __future__ import annotations

import logging
import os
import threading
import time
from typing import Any, Callable, Dict, List, Optional, Tuple

import requests

from skybound.core.constants import FETCH_LIMIT
from skybound.core.models import FilterState, LocationSuggestion, SearchCriteria
from skybound.providers.base import ProviderError

logger = logging.getLogger(__name__)

# Refresh tokens this many seconds before the provider says they expire.
TOKEN_EXPIRY_MARGIN_SECONDS = 60


class TokenCache:
    """
    OAuth2 access token with an expiry timestamp.

    get_token() returns the cached token while it is fresh and otherwise calls
    `fetch` under a lock, so concurrent callers trigger a single refresh.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._lock = threading.Lock()
        self._access_token: Optional[str] = None
        self._expiry_epoch: float = 0.0

    def _is_valid(self) -> bool:
        return bool(self._access_token) and self._clock() < (self._expiry_epoch - TOKEN_EXPIRY_MARGIN_SECONDS)

    def get_token(self, fetch: Callable[[], Tuple[str, int]]) -> str:
        if self._is_valid():
            return self._access_token  # type: ignore[return-value]
        with self._lock:
            # Another thread may have refreshed while we waited.
            if not self._is_valid():
                token, expires_in = fetch()
                self._access_token = token
                self._expiry_epoch = self._clock() + expires_in
            return self._access_token  # type: ignore[return-value]

    def invalidate(self) -> None:
        with self._lock:
            self._access_token = None
            self._expiry_epoch = 0.0


_token_caches: Dict[Tuple[str, str], TokenCache] = {}
_token_caches_lock = threading.Lock()


def shared_token_cache(base_url: str, client_id: str) -> TokenCache:
    """Process-wide token cache per (environment, credentials)."""
    key = (base_url, client_id)
    with _token_caches_lock:
        cache = _token_caches.get(key)
        if cache is None:
            cache = TokenCache()
            _token_caches[key] = cache
        return cache


def clear_token_caches() -> None:
    with _token_caches_lock:
        _token_caches.clear()


def _error_detail(resp: requests.Response, default: str) -> str:
    try:
        payload = resp.json()
    except ValueError:
        return default
    errors = payload.get("errors") if isinstance(payload, dict) else None
    if isinstance(errors, list) and errors and isinstance(errors[0], dict):
        return str(errors[0].get("detail") or default)
    return default


class AmadeusClient:
    """
    Minimal Amadeus REST client with OAuth2 client-credentials token caching.
    """

    def __init__(
        self,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        env: Optional[str] = None,
        timeout_seconds: int = 20,
        token_cache: Optional[TokenCache] = None,
    ):
        self.client_id = (client_id or os.getenv(
            "AMADEUS_CLIENT_ID", "")).strip()
        self.client_secret = (client_secret or os.getenv(
            "AMADEUS_CLIENT_SECRET", "")).strip()
        self.env = (env or os.getenv("AMADEUS_ENV", "test")).strip().lower()
        self.timeout_seconds = timeout_seconds

        if not self.client_id or not self.client_secret:
            raise ValueError(
                "Missing Amadeus credentials. Set AMADEUS_CLIENT_ID and AMADEUS_CLIENT_SECRET."
            )

        # Base URLs for Self-Service APIs
        self.base_url = (
            "https://api.amadeus.com"
            if self.env == "production"
            else "https://test.api.amadeus.com"
        )

        self._tokens = token_cache or shared_token_cache(self.base_url, self.client_id)

    def _fetch_token(self) -> Tuple[str, int]:
        url = f"{self.base_url}/v1/security/oauth2/token"
        data = {"grant_type": "client_credentials"}
        headers = {"Content-Type": "application/x-www-form-urlencoded"}

        try:
            resp = requests.post(
                url,
                data=data,
                headers=headers,
                auth=(self.client_id, self.client_secret),
                timeout=self.timeout_seconds,
            )
        except requests.RequestException as exc:
            raise ProviderError(f"Amadeus token request failed: {exc}") from exc

        # Keep the status code but never echo credentials back
        if resp.status_code != 200:
            raise ProviderError(
                "Failed to authenticate with Amadeus API",
                status_code=resp.status_code,
            )

        payload = resp.json()
        logger.info("Fetched new Amadeus access token (%s)", self.env)
        return payload["access_token"], int(payload.get("expires_in", 1800))

    def _get_auth_header(self) -> Dict[str, str]:
        token = self._tokens.get_token(self._fetch_token)
        return {"Authorization": f"Bearer {token}"}

    def _send(self, url: str, params: Dict[str, Any]) -> requests.Response:
        try:
            return requests.get(url, params=params,
                                headers=self._get_auth_header(), timeout=self.timeout_seconds)
        except requests.RequestException as exc:
            logger.warning("Amadeus request to %s failed: %s", url, exc)
            raise ProviderError(f"Amadeus request failed: {exc}") from exc

    def get(self, path: str, params: Dict[str, Any], error_message: str = "Amadeus request failed") -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        resp = self._send(url, params)

        # If token expired unexpectedly, refresh once and retry
        if resp.status_code == 401:
            self._tokens.invalidate()
            resp = self._send(url, params)

        if not resp.ok:
            detail = _error_detail(resp, error_message)
            logger.warning("Amadeus %s returned %s: %s", path, resp.status_code, detail)
            raise ProviderError(detail, status_code=resp.status_code)
        return resp.json()

    def search_flight_offers(
        self,
        criteria: SearchCriteria,
        filters: Optional[FilterState] = None,
        limit: int = FETCH_LIMIT,
        currency: str = "USD",
    ) -> Dict[str, Any]:
        """
        Raw Flight Offers Search payload ('data' + 'dictionaries').
        Stop/carrier filters are pushed to the API where it supports them.
        """
        criteria.validate()

        query: Dict[str, Any] = {
            "originLocationCode": criteria.origin,
            "destinationLocationCode": criteria.destination,
            "departureDate": criteria.departure_date,
            "adults": max(1, int(criteria.passengers)),
            "currencyCode": currency,
            "max": limit,
        }

        if criteria.return_date:
            query["returnDate"] = criteria.return_date

        if filters is not None:
            if filters.stops == frozenset({0}):
                query["nonStop"] = "true"
            if filters.airlines:
                query["includedAirlineCodes"] = ",".join(sorted(filters.airlines))

        return self.get("/v2/shopping/flight-offers", query,
                        error_message="Failed to fetch flight offers")

    def search_locations(self, keyword: str) -> List[LocationSuggestion]:
        """
        City/airport autocomplete. Upstream failures yield an empty list.
        """
        if not keyword or len(keyword.strip()) < 2:
            return []

        query = {
            "subType": "CITY,AIRPORT",
            "keyword": keyword.strip(),
            "view": "LIGHT",
        }
        try:
            payload = self.get("/v1/reference-data/locations", query)
        except ProviderError as exc:
            logger.warning("Location search for %r failed: %s", keyword, exc)
            return []

        suggestions: List[LocationSuggestion] = []
        for item in payload.get("data", []) or []:
            code = item.get("iataCode")
            if not code:
                continue
            address = item.get("address", {}) or {}
            suggestions.append(
                LocationSuggestion(
                    name=str(item.get("name", "")),
                    iata_code=str(code),
                    detailed_name=str(item.get("detailedName", "")),
                    sub_type=str(item.get("subType", "")),
                    city_name=str(address.get("cityName", "")),
                    country_name=str(address.get("countryName", "")),
                )
            )
        return suggestions
