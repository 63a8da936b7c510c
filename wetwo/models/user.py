"""User, zodiac sign and credential models."""

import uuid
from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, SecretStr


class ZodiacSign(str, Enum):
    """Western zodiac signs."""

    ARIES = "Aries"
    TAURUS = "Taurus"
    GEMINI = "Gemini"
    CANCER = "Cancer"
    LEO = "Leo"
    VIRGO = "Virgo"
    LIBRA = "Libra"
    SCORPIO = "Scorpio"
    SAGITTARIUS = "Sagittarius"
    CAPRICORN = "Capricorn"
    AQUARIUS = "Aquarius"
    PISCES = "Pisces"

    @property
    def emoji(self) -> str:
        return _ZODIAC_EMOJI[self]

    @property
    def element(self) -> str:
        if self in (ZodiacSign.ARIES, ZodiacSign.LEO, ZodiacSign.SAGITTARIUS):
            return "Fire"
        if self in (ZodiacSign.TAURUS, ZodiacSign.VIRGO, ZodiacSign.CAPRICORN):
            return "Earth"
        if self in (ZodiacSign.GEMINI, ZodiacSign.LIBRA, ZodiacSign.AQUARIUS):
            return "Air"
        return "Water"

    @classmethod
    def from_birth_date(cls, birth_date: date) -> "ZodiacSign":
        """Get the sign for a birth date.

        Args:
            birth_date: Date of birth. Only month and day are used.

        Returns:
            The zodiac sign whose date range contains the birthday.
        """
        key = (birth_date.month, birth_date.day)
        # Each sign starts on the given (month, day); Capricorn wraps the year end.
        for start, sign in reversed(_SIGN_STARTS):
            if key >= start:
                return sign
        return cls.CAPRICORN


_SIGN_STARTS = [
    ((1, 20), ZodiacSign.AQUARIUS),
    ((2, 19), ZodiacSign.PISCES),
    ((3, 21), ZodiacSign.ARIES),
    ((4, 20), ZodiacSign.TAURUS),
    ((5, 21), ZodiacSign.GEMINI),
    ((6, 21), ZodiacSign.CANCER),
    ((7, 23), ZodiacSign.LEO),
    ((8, 23), ZodiacSign.VIRGO),
    ((9, 23), ZodiacSign.LIBRA),
    ((10, 23), ZodiacSign.SCORPIO),
    ((11, 22), ZodiacSign.SAGITTARIUS),
    ((12, 22), ZodiacSign.CAPRICORN),
]

_ZODIAC_EMOJI = {
    ZodiacSign.ARIES: "♈️",
    ZodiacSign.TAURUS: "♉️",
    ZodiacSign.GEMINI: "♊️",
    ZodiacSign.CANCER: "♋️",
    ZodiacSign.LEO: "♌️",
    ZodiacSign.VIRGO: "♍️",
    ZodiacSign.LIBRA: "♎️",
    ZodiacSign.SCORPIO: "♏️",
    ZodiacSign.SAGITTARIUS: "♐️",
    ZodiacSign.CAPRICORN: "♑️",
    ZodiacSign.AQUARIUS: "♒️",
    ZodiacSign.PISCES: "♓️",
}


class User(BaseModel):
    """Cached snapshot of the signed-in user."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), description="User ID")
    name: str = Field(..., min_length=1, description="Display name")
    birth_date: date = Field(..., description="Date of birth")
    email: Optional[str] = Field(default=None, description="Account email")
    partner_code: Optional[str] = Field(default=None, description="Code used to link a partner")
    partner_id: Optional[str] = Field(default=None, description="Linked partner's user ID")

    model_config = {"frozen": True}

    @property
    def zodiac_sign(self) -> ZodiacSign:
        return ZodiacSign.from_birth_date(self.birth_date)

    @property
    def has_partner(self) -> bool:
        return self.partner_id is not None

    def with_partner_code(self, code: str) -> "User":
        return self.model_copy(update={"partner_code": code})


class Credentials(BaseModel):
    """Email/password pair used to re-establish a session."""

    email: str = Field(..., min_length=1, description="Account email")
    password: SecretStr = Field(..., description="Account password")

    model_config = {"frozen": True}
