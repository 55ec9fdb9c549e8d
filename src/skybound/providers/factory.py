# src/skybound/providers/factory.py

from typing import Optional

from skybound.providers.amadeus_provider import AmadeusProvider
from skybound.providers.base import FlightSearchProvider, ProviderError
from skybound.providers.mock_provider import MockProvider
from skybound.services.amadeus_client import AmadeusClient
from skybound.settings import AppSettings, load_settings


def get_provider(name: Optional[str] = None, settings: Optional[AppSettings] = None) -> FlightSearchProvider:
    """Return the configured flight provider instance."""

    settings = settings or load_settings()
    provider_name = (name or settings.provider or "amadeus").strip().lower()

    if provider_name == "mock":
        return MockProvider()

    if provider_name == "amadeus":
        client = AmadeusClient(
            client_id=settings.amadeus_client_id,
            client_secret=settings.amadeus_client_secret,
            env=settings.amadeus_env,
        )
        return AmadeusProvider(client, max_results=settings.fetch_limit, currency=settings.currency)

    raise ProviderError(f"Unknown flights provider: {provider_name}", status_code=500)
