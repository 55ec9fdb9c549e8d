# src/skybound/search_history_store.py

from __future__ import annotations

import os
import sqlite3
from datetime import datetime, timezone
from typing import Optional

import pandas as pd

from skybound.core.models import SearchCriteria
from skybound.settings import DEFAULT_HISTORY_DB


def _ensure_parent_dir(path: str) -> None:
    parent = os.path.dirname(path)
    if parent and not os.path.exists(parent):
        os.makedirs(parent, exist_ok=True)


class SqliteSearchHistoryStore:
    """
    SQLite-backed log of submitted searches, used to pre-fill the search form.
    Only the criteria are stored, never the offers themselves.
    """

    def __init__(self, db_path: str = DEFAULT_HISTORY_DB):
        self.db_path = db_path
        _ensure_parent_dir(self.db_path)
        self._init_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.execute("PRAGMA journal_mode=WAL;")
        conn.execute("PRAGMA synchronous=NORMAL;")
        return conn

    def _init_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS searches (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    search_ts TEXT NOT NULL,
                    origin TEXT NOT NULL,
                    destination TEXT NOT NULL,
                    departure_date TEXT NOT NULL,
                    return_date TEXT,
                    passengers INTEGER NOT NULL
                );
                """
            )
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_searches_ts ON searches(search_ts);"
            )

    def record(self, criteria: SearchCriteria, search_ts: Optional[datetime] = None) -> None:
        search_ts = search_ts or datetime.now(timezone.utc)
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO searches (
                    search_ts, origin, destination, departure_date, return_date, passengers
                ) VALUES (?, ?, ?, ?, ?, ?);
                """,
                (
                    search_ts.isoformat(),
                    criteria.origin,
                    criteria.destination,
                    criteria.departure_date,
                    criteria.return_date or None,
                    int(criteria.passengers),
                ),
            )

    def last(self) -> Optional[SearchCriteria]:
        with self._connect() as conn:
            row = conn.execute(
                """
                SELECT origin, destination, departure_date, return_date, passengers
                FROM searches
                ORDER BY id DESC
                LIMIT 1;
                """
            ).fetchone()
        if row is None:
            return None
        return SearchCriteria(
            origin=row[0],
            destination=row[1],
            departure_date=row[2],
            return_date=row[3],
            passengers=int(row[4]),
        )

    def recent(self, limit: int = 10) -> pd.DataFrame:
        """
        Most recent searches first.
        """
        with self._connect() as conn:
            df = pd.read_sql_query(
                """
                SELECT search_ts, origin, destination, departure_date, return_date, passengers
                FROM searches
                ORDER BY id DESC
                LIMIT ?;
                """,
                conn,
                params=(int(limit),),
            )
        return df
