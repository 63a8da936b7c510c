"""Session state models."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from wetwo.models.user import User


class SessionPhase(str, Enum):
    """Where the user lands after startup."""

    ONBOARDING = "onboarding"
    ACTIVE = "active"


class SessionState(BaseModel):
    """Process-wide session state. Rebuilt from local storage on every launch."""

    phase: SessionPhase = Field(default=SessionPhase.ONBOARDING, description="Session phase")
    current_user: Optional[User] = Field(default=None, description="Signed-in user")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _active_requires_user(self) -> "SessionState":
        if self.phase == SessionPhase.ACTIVE and self.current_user is None:
            raise ValueError("active session requires a current user")
        return self

    @property
    def is_active(self) -> bool:
        return self.phase == SessionPhase.ACTIVE

    @classmethod
    def onboarding(cls) -> "SessionState":
        return cls(phase=SessionPhase.ONBOARDING)

    @classmethod
    def active(cls, user: User) -> "SessionState":
        return cls(phase=SessionPhase.ACTIVE, current_user=user)
