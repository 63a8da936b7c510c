"""Mood data models."""

import uuid
from datetime import date as date_type
from datetime import datetime
from enum import Enum, IntEnum
from typing import Optional

from pydantic import BaseModel, Field


class MoodLevel(IntEnum):
    """Self-reported mood for a day, from 1 (very sad) to 5 (very happy)."""

    VERY_SAD = 1
    SAD = 2
    NEUTRAL = 3
    HAPPY = 4
    VERY_HAPPY = 5

    @property
    def emoji(self) -> str:
        return _MOOD_EMOJI[self]

    @property
    def label(self) -> str:
        return _MOOD_LABELS[self]


_MOOD_EMOJI = {
    MoodLevel.VERY_HAPPY: "😍",
    MoodLevel.HAPPY: "😊",
    MoodLevel.NEUTRAL: "😐",
    MoodLevel.SAD: "😔",
    MoodLevel.VERY_SAD: "😩",
}

_MOOD_LABELS = {
    MoodLevel.VERY_HAPPY: "Ecstatic",
    MoodLevel.HAPPY: "Happy",
    MoodLevel.NEUTRAL: "Neutral",
    MoodLevel.SAD: "Sad",
    MoodLevel.VERY_SAD: "Very Sad",
}


class MoodTrend(str, Enum):
    """Direction of mood change over a window."""

    IMPROVING = "improving"
    STABLE = "stable"
    DECLINING = "declining"

    @property
    def emoji(self) -> str:
        return {"improving": "📈", "stable": "➡️", "declining": "📉"}[self.value]


class MoodEntry(BaseModel):
    """Represents one user's mood for one day."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), description="Entry ID")
    owner_id: str = Field(..., min_length=1, description="ID of the user who logged the mood")
    date: datetime = Field(..., description="Day the mood refers to")
    mood_level: MoodLevel = Field(..., description="Mood level (1-5)")
    event_label: Optional[str] = Field(default=None, description="What happened that day")
    location: Optional[str] = Field(default=None, description="Where the mood was logged")
    photo_ref: Optional[str] = Field(default=None, description="Reference to an uploaded photo")
    insight: Optional[str] = Field(default=None, description="Generated insight")
    love_message: Optional[str] = Field(default=None, description="Message for the partner")
    created_at: datetime = Field(
        default_factory=datetime.now, description="When the entry was created"
    )

    model_config = {"frozen": True}

    def with_enrichment(
        self,
        insight: Optional[str] = None,
        love_message: Optional[str] = None,
    ) -> "MoodEntry":
        """Return a copy with the insight and/or love message filled in.

        These are the only fields that may change after an entry is persisted.
        """
        update = {}
        if insight is not None:
            update["insight"] = insight
        if love_message is not None:
            update["love_message"] = love_message
        return self.model_copy(update=update)


class WeeklyMoodSummary(BaseModel):
    """Summary of a week of mood entries. Derived, never persisted."""

    week_start_date: date_type = Field(..., description="First day of the week")
    average_mood: float = Field(..., ge=1, le=5, description="Average mood level")
    mood_trend: MoodTrend = Field(..., description="Trend over the week")
    most_frequent_mood: MoodLevel = Field(..., description="Most frequent mood level")
    insights: list[str] = Field(default_factory=list, description="Observations about the week")
    entry_count: int = Field(default=0, ge=0, description="Number of entries in the week")

    model_config = {"frozen": True}
