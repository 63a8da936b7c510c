"""SQLite local store for WeTwo."""

import logging
import sqlite3
from datetime import date, datetime, time, timedelta
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from wetwo.models import Credentials, MoodEntry, MoodLevel, User

logger = logging.getLogger(__name__)

CURRENT_USER_KEY = "current_user"
EMAIL_KEY = "user_email"
PASSWORD_KEY = "user_password"


class LocalStore:
    """SQLite-based key-value store plus local mood entry history."""

    REQUIRED_TABLES = [
        "kv",
        "mood_entries",
    ]

    def __init__(self, db_path: Path):
        """Initialize the local store.

        Args:
            db_path: Path to the SQLite database file.
        """
        self.db_path = db_path
        self._ensure_db_dir()
        self._init_schema()

    def _ensure_db_dir(self) -> None:
        """Ensure the database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def _get_connection(self) -> sqlite3.Connection:
        """Get a database connection."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self) -> None:
        """Initialize database schema on first run."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS mood_entries (
                    id TEXT PRIMARY KEY,
                    owner_id TEXT NOT NULL,
                    date TEXT NOT NULL,
                    mood_level INTEGER NOT NULL,
                    event_label TEXT,
                    location TEXT,
                    photo_ref TEXT,
                    insight TEXT,
                    love_message TEXT,
                    created_at TEXT NOT NULL
                )
            """)

            conn.commit()
        finally:
            conn.close()

    def get_tables(self) -> list[str]:
        """Get list of all tables in the database."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%'"
            )
            return [row["name"] for row in cursor.fetchall()]
        finally:
            conn.close()

    # ==================== Key-value ====================

    def get(self, key: str) -> Optional[str]:
        """Get a stored value, or None if the key is not set."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("SELECT value FROM kv WHERE key = ?", (key,))
            row = cursor.fetchone()
            return row["value"] if row else None
        finally:
            conn.close()

    def set(self, key: str, value: str) -> None:
        """Store a value, replacing any previous one."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "INSERT OR REPLACE INTO kv (key, value) VALUES (?, ?)",
                (key, value),
            )
            conn.commit()
        finally:
            conn.close()

    def clear(self, key: str) -> None:
        """Remove a key. Removing a missing key is a no-op."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM kv WHERE key = ?", (key,))
            conn.commit()
        finally:
            conn.close()

    # ==================== Session ====================

    def load_user(self) -> Optional[User]:
        """Load the cached user snapshot.

        An unreadable snapshot is treated as missing.
        """
        raw = self.get(CURRENT_USER_KEY)
        if raw is None:
            return None
        try:
            return User.model_validate_json(raw)
        except ValidationError as e:
            logger.warning("Ignoring unreadable cached user: %s", e)
            return None

    def save_user(self, user: User) -> None:
        self.set(CURRENT_USER_KEY, user.model_dump_json())

    def clear_user(self) -> None:
        self.clear(CURRENT_USER_KEY)

    def load_credentials(self) -> Optional[Credentials]:
        """Load the stored credential pair, or None unless both halves exist."""
        email = self.get(EMAIL_KEY)
        password = self.get(PASSWORD_KEY)
        if not email or not password:
            return None
        return Credentials(email=email, password=password)

    def save_credentials(self, credentials: Credentials) -> None:
        self.set(EMAIL_KEY, credentials.email)
        self.set(PASSWORD_KEY, credentials.password.get_secret_value())

    def clear_credentials(self) -> None:
        self.clear(EMAIL_KEY)
        self.clear(PASSWORD_KEY)

    # ==================== Mood entries ====================

    def save_mood_entry(self, entry: MoodEntry) -> None:
        """Save a mood entry, replacing an entry with the same ID."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT OR REPLACE INTO mood_entries
                (id, owner_id, date, mood_level, event_label, location,
                 photo_ref, insight, love_message, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    entry.id,
                    entry.owner_id,
                    entry.date.isoformat(),
                    int(entry.mood_level),
                    entry.event_label,
                    entry.location,
                    entry.photo_ref,
                    entry.insight,
                    entry.love_message,
                    entry.created_at.isoformat(),
                ),
            )
            conn.commit()
        finally:
            conn.close()

    def get_mood_entries(
        self,
        owner_id: Optional[str] = None,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
    ) -> list[MoodEntry]:
        """Get mood entries, oldest first.

        Args:
            owner_id: Only entries of this user. All users if None.
            from_date: First day to include.
            to_date: Last day to include.

        Returns:
            List of mood entries.
        """
        query = "SELECT * FROM mood_entries WHERE 1=1"
        params: list = []

        if owner_id is not None:
            query += " AND owner_id = ?"
            params.append(owner_id)
        if from_date is not None:
            query += " AND date >= ?"
            params.append(datetime.combine(from_date, time.min).isoformat())
        if to_date is not None:
            query += " AND date < ?"
            params.append(datetime.combine(to_date + timedelta(days=1), time.min).isoformat())

        query += " ORDER BY date ASC, created_at ASC"

        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(query, params)
            return [self._row_to_entry(row) for row in cursor.fetchall()]
        finally:
            conn.close()

    def delete_mood_entry(self, entry_id: str) -> bool:
        """Delete a mood entry.

        Returns:
            True if an entry was deleted.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM mood_entries WHERE id = ?", (entry_id,))
            conn.commit()
            return cursor.rowcount > 0
        finally:
            conn.close()

    @staticmethod
    def _row_to_entry(row: sqlite3.Row) -> MoodEntry:
        return MoodEntry(
            id=row["id"],
            owner_id=row["owner_id"],
            date=datetime.fromisoformat(row["date"]),
            mood_level=MoodLevel(row["mood_level"]),
            event_label=row["event_label"],
            location=row["location"],
            photo_ref=row["photo_ref"],
            insight=row["insight"],
            love_message=row["love_message"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )
