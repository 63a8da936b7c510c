"""Data models for WeTwo."""

from wetwo.models.mood import MoodEntry, MoodLevel, MoodTrend, WeeklyMoodSummary
from wetwo.models.user import Credentials, User, ZodiacSign
from wetwo.models.memory import MemoryEntry
from wetwo.models.session import SessionPhase, SessionState

__all__ = [
    "Credentials",
    "MemoryEntry",
    "MoodEntry",
    "MoodLevel",
    "MoodTrend",
    "SessionPhase",
    "SessionState",
    "User",
    "WeeklyMoodSummary",
    "ZodiacSign",
]
