"""SQLite storage for public holidays."""

from __future__ import annotations

import sqlite3
import threading
from dataclasses import dataclass
from typing import Any

_SCHEMA = """
CREATE TABLE IF NOT EXISTS holidays (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    date TEXT NOT NULL,
    description TEXT,
    country TEXT NOT NULL
)
"""


@dataclass
class Holiday:
    """A holiday as stored in the database."""

    date: str
    country: str
    description: str = ""
    id: int | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return the holiday as a JSON-ready mapping."""
        return {
            "id": self.id,
            "date": self.date,
            "description": self.description,
            "country": self.country,
        }

    @classmethod
    def _from_row(cls, row: sqlite3.Row) -> Holiday:
        return cls(
            id=row["id"],
            date=row["date"],
            description=row["description"] or "",
            country=row["country"],
        )


class Database:
    """Thread-safe access to the holidays table of one SQLite file."""

    def __init__(self, path: str) -> None:
        self.path = path
        self._lock = threading.Lock()
        self._conn = sqlite3.connect(path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        try:
            with self._conn:
                self._conn.execute(_SCHEMA)
        except sqlite3.Error:
            self._conn.close()
            raise

    def __enter__(self) -> Database:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def add_holiday(self, holiday: Holiday) -> int:
        """Insert a holiday and return its new id."""
        with self._lock, self._conn:
            cursor = self._conn.execute(
                "INSERT INTO holidays (date, description, country) VALUES (?, ?, ?)",
                (holiday.date, holiday.description, holiday.country),
            )
            return cursor.lastrowid

    def get_holidays_by_country(self, country: str) -> list[Holiday]:
        """Return every holiday stored for the given country code."""
        with self._lock:
            rows = self._conn.execute(
                "SELECT id, date, description, country FROM holidays WHERE country = ?",
                (country,),
            ).fetchall()
        return [Holiday._from_row(row) for row in rows]

    def get_all_holidays(self) -> list[Holiday]:
        """Return every stored holiday."""
        with self._lock:
            rows = self._conn.execute(
                "SELECT id, date, description, country FROM holidays"
            ).fetchall()
        return [Holiday._from_row(row) for row in rows]

    def delete_holiday(self, holiday_id: int) -> None:
        """Remove the holiday with the given id, if any."""
        with self._lock, self._conn:
            self._conn.execute("DELETE FROM holidays WHERE id = ?", (holiday_id,))

    def clone(self) -> Database:
        """Open a new connection to the same database path."""
        return Database(self.path)

    def close(self) -> None:
        """Close the underlying connection."""
        with self._lock:
            self._conn.close()