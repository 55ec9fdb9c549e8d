# src/skybound/settings.py

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from skybound.core.constants import FETCH_LIMIT, ITEMS_PER_PAGE

DEFAULT_HISTORY_DB = os.path.join("data", "search_history.sqlite")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class AppSettings:
    amadeus_client_id: str = ""
    amadeus_client_secret: str = ""
    amadeus_env: str = "test"
    fetch_limit: int = FETCH_LIMIT
    page_size: int = ITEMS_PER_PAGE
    currency: str = "USD"
    history_db_path: str = DEFAULT_HISTORY_DB
    provider: str = "amadeus"
    log_level: str = "INFO"

    @property
    def amadeus_configured(self) -> bool:
        return bool(self.amadeus_client_id and self.amadeus_client_secret)


def load_settings(env_file: Optional[str] = None) -> AppSettings:
    """
    Read settings from the environment (and a .env file, if present).
    Values already set in the environment win over the .env file.
    """
    load_dotenv(env_file)

    return AppSettings(
        amadeus_client_id=os.getenv("AMADEUS_CLIENT_ID", "").strip(),
        amadeus_client_secret=os.getenv("AMADEUS_CLIENT_SECRET", "").strip(),
        amadeus_env=os.getenv("AMADEUS_ENV", "test").strip().lower(),
        fetch_limit=max(1, _env_int("SKYBOUND_FETCH_LIMIT", FETCH_LIMIT)),
        page_size=max(1, _env_int("SKYBOUND_PAGE_SIZE", ITEMS_PER_PAGE)),
        currency=os.getenv("SKYBOUND_CURRENCY", "USD").strip().upper() or "USD",
        history_db_path=os.getenv("SKYBOUND_HISTORY_DB", DEFAULT_HISTORY_DB),
        provider=os.getenv("SKYBOUND_PROVIDER", "amadeus").strip().lower() or "amadeus",
        log_level=os.getenv("SKYBOUND_LOG_LEVEL", "INFO").strip().upper() or "INFO",
    )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
