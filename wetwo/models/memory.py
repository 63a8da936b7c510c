"""MemoryEntry data model."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from wetwo.models.mood import MoodLevel


class MemoryEntry(BaseModel):
    """Represents a memory on the couple's timeline."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), description="Memory ID")
    user_id: str = Field(..., min_length=1, description="Author's user ID")
    partner_id: Optional[str] = Field(default=None, description="Partner the memory is shared with")
    date: datetime = Field(..., description="When the memory happened")
    title: str = Field(..., min_length=1, description="Short title")
    description: Optional[str] = Field(default=None, description="Longer description")
    location: Optional[str] = Field(default=None, description="Where it happened")
    mood_level: MoodLevel = Field(default=MoodLevel.HAPPY, description="Mood attached to the memory")
    tags: list[str] = Field(default_factory=list, description="Free-form tags")
    created_at: datetime = Field(default_factory=datetime.now, description="Creation timestamp")

    model_config = {"frozen": True}

    @property
    def is_shared(self) -> bool:
        return self.partner_id is not None
