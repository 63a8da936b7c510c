"""Shared fixtures and strategies for WeTwo tests."""

import tempfile
from datetime import date, datetime, timedelta
from pathlib import Path

import pytest
from hypothesis import strategies as st

from wetwo.db.store import LocalStore
from wetwo.models import MoodEntry, MoodLevel, User


@pytest.fixture
def temp_store():
    """Create a temporary local store for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield LocalStore(Path(tmpdir) / "test.db")


@pytest.fixture
def sample_user() -> User:
    return User(id="user-1", name="Alex", birth_date=date(1994, 7, 30), email="alex@example.com")


def make_entry(day: date, level: int, owner_id: str = "user-1", **kwargs) -> MoodEntry:
    """Build a mood entry at noon of ``day``."""
    return MoodEntry(
        owner_id=owner_id,
        date=datetime.combine(day, datetime.min.time()) + timedelta(hours=12),
        mood_level=MoodLevel(level),
        **kwargs,
    )


def mood_entry_strategy():
    """Generate valid MoodEntry objects for testing."""
    return st.builds(
        MoodEntry,
        owner_id=st.sampled_from(["user-1", "user-2"]),
        date=st.datetimes(
            min_value=datetime(2023, 1, 1),
            max_value=datetime(2026, 12, 31),
        ),
        mood_level=st.sampled_from(list(MoodLevel)),
        created_at=st.datetimes(
            min_value=datetime(2023, 1, 1),
            max_value=datetime(2026, 12, 31),
        ),
    )
