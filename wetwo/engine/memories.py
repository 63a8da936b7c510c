"""Filtering and statistics for the memory timeline."""

from enum import Enum
from typing import Iterable, Optional

from pydantic import BaseModel, Field

from wetwo.engine.aggregation import average_mood
from wetwo.engine.calendar import DateLike, LocalCalendar
from wetwo.models import MemoryEntry

FAVORITE_TAG = "favorite"


class MemoryFilter(str, Enum):
    """Timeline filters."""

    ALL = "all"
    SHARED = "shared"
    PERSONAL = "personal"
    FAVORITES = "favorites"


class MemoryStats(BaseModel):
    """Counts and average mood for a set of memories."""

    total: int = Field(..., ge=0, description="Number of memories")
    shared: int = Field(..., ge=0, description="Memories shared with the partner")
    personal: int = Field(..., ge=0, description="Memories not shared")
    average_mood: float = Field(..., ge=1, le=5, description="Average mood level")

    model_config = {"frozen": True}


def timeline(memories: Iterable[MemoryEntry]) -> list[MemoryEntry]:
    """Memories sorted newest first."""
    return sorted(memories, key=lambda m: (m.date.timestamp(), m.id), reverse=True)


def filter_memories(
    memories: Iterable[MemoryEntry],
    memory_filter: MemoryFilter = MemoryFilter.ALL,
) -> list[MemoryEntry]:
    """Apply a timeline filter, keeping newest-first order."""
    items = timeline(memories)
    if memory_filter == MemoryFilter.SHARED:
        return [m for m in items if m.is_shared]
    if memory_filter == MemoryFilter.PERSONAL:
        return [m for m in items if not m.is_shared]
    if memory_filter == MemoryFilter.FAVORITES:
        return [m for m in items if FAVORITE_TAG in m.tags]
    return items


def memories_for_date(
    memories: Iterable[MemoryEntry],
    day: DateLike,
    calendar: Optional[LocalCalendar] = None,
) -> list[MemoryEntry]:
    calendar = calendar or LocalCalendar()
    return [m for m in timeline(memories) if calendar.same_day(m.date, day)]


def memories_for_month(
    memories: Iterable[MemoryEntry],
    reference: DateLike,
    calendar: Optional[LocalCalendar] = None,
) -> list[MemoryEntry]:
    calendar = calendar or LocalCalendar()
    return [m for m in timeline(memories) if calendar.same_month(m.date, reference)]


def memories_for_year(
    memories: Iterable[MemoryEntry],
    reference: DateLike,
    calendar: Optional[LocalCalendar] = None,
) -> list[MemoryEntry]:
    calendar = calendar or LocalCalendar()
    return [m for m in timeline(memories) if calendar.same_year(m.date, reference)]


def recent_memories(memories: Iterable[MemoryEntry], limit: int = 5) -> list[MemoryEntry]:
    """The ``limit`` newest memories."""
    if limit < 0:
        raise ValueError(f"limit must be non-negative, got {limit}")
    return timeline(memories)[:limit]


def memory_stats(memories: Iterable[MemoryEntry]) -> MemoryStats:
    """Count memories and average their moods.

    The average falls back to 3.0 for an empty timeline.
    """
    items = list(memories)
    shared = sum(1 for m in items if m.is_shared)
    return MemoryStats(
        total=len(items),
        shared=shared,
        personal=len(items) - shared,
        average_mood=average_mood(items),
    )
