"""Calendar used for day/week/month bucketing.

Every calendar decision within one computation goes through a single
``LocalCalendar`` so that entries near midnight or a month boundary are
bucketed consistently.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo
from typing import Optional, Union

import pytz

DateLike = Union[date, datetime]

MONDAY = 0
SUNDAY = 6


@dataclass(frozen=True)
class LocalCalendar:
    """The consumer's calendar.

    Attributes:
        tz: Time zone that defines calendar days. ``None`` means the
            system local zone.
        first_weekday: First day of the week (0=Monday ... 6=Sunday).
    """

    tz: Optional[tzinfo] = None
    first_weekday: int = MONDAY

    def __post_init__(self) -> None:
        if not 0 <= self.first_weekday <= 6:
            raise ValueError(f"first_weekday must be 0-6, got {self.first_weekday}")

    @classmethod
    def from_name(cls, zone: Optional[str], first_weekday: int = MONDAY) -> "LocalCalendar":
        """Build a calendar from an IANA zone name (e.g. 'Europe/Berlin').

        Raises:
            ValueError: If the zone name is unknown.
        """
        if not zone:
            return cls(first_weekday=first_weekday)
        try:
            return cls(tz=pytz.timezone(zone), first_weekday=first_weekday)
        except pytz.UnknownTimeZoneError:
            raise ValueError(f"Unknown time zone: {zone}")

    def day_of(self, value: DateLike) -> date:
        """Get the calendar day of a date or datetime.

        Naive datetimes are taken to be local already; aware ones are
        converted to the calendar's zone first.
        """
        if not isinstance(value, datetime):
            return value
        if value.tzinfo is None:
            return value.date()
        if self.tz is None:
            return value.astimezone().date()
        return value.astimezone(self.tz).date()

    def same_day(self, a: DateLike, b: DateLike) -> bool:
        return self.day_of(a) == self.day_of(b)

    def same_month(self, a: DateLike, b: DateLike) -> bool:
        da, db = self.day_of(a), self.day_of(b)
        return (da.year, da.month) == (db.year, db.month)

    def same_year(self, a: DateLike, b: DateLike) -> bool:
        return self.day_of(a).year == self.day_of(b).year

    def week_start(self, value: DateLike) -> date:
        """First day of the week containing ``value``."""
        day = self.day_of(value)
        offset = (day.weekday() - self.first_weekday) % 7
        return day - timedelta(days=offset)

    def is_weekend(self, value: DateLike) -> bool:
        return self.day_of(value).weekday() >= 5
