"""Mood aggregation over lists of mood entries.

Every function here is pure: no I/O, no shared state. Inputs that cannot be
read as a mood level are skipped and empty inputs fall back to neutral
defaults instead of raising, so a summary can always be displayed.
"""

import math
from collections import Counter
from datetime import timedelta
from typing import Any, Iterable, Optional

from wetwo.engine.calendar import DateLike, LocalCalendar
from wetwo.models import MoodEntry, MoodLevel, MoodTrend

NEUTRAL_MOOD = 3.0
DEFAULT_TREND_DELTA = 0.5
POSITIVE_LEVEL = 4

MIN_LEVEL = float(MoodLevel.VERY_SAD)
MAX_LEVEL = float(MoodLevel.VERY_HAPPY)


def _level_value(item: Any) -> Optional[float]:
    """Read a mood level from an entry or a raw number.

    Returns:
        The level as a float, or None if it is not a finite number in [1, 5].
    """
    raw = getattr(item, "mood_level", item)
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value) or not MIN_LEVEL <= value <= MAX_LEVEL:
        return None
    return value


def _valid_levels(items: Iterable[Any]) -> list[float]:
    values = []
    for item in items:
        value = _level_value(item)
        if value is not None:
            values.append(value)
    return values


def _chronological_key(entry: MoodEntry, calendar: LocalCalendar) -> tuple:
    return (calendar.day_of(entry.date), entry.created_at.timestamp(), entry.id)


def average_mood(entries: Iterable[Any]) -> float:
    """Calculate the average mood level.

    Args:
        entries: Mood entries or raw level values.

    Returns:
        Arithmetic mean of the valid levels, or NEUTRAL_MOOD (3.0) when there
        are none or the result would not be finite.
    """
    values = _valid_levels(entries)
    if not values:
        return NEUTRAL_MOOD

    total = math.fsum(values)
    if not math.isfinite(total):
        return NEUTRAL_MOOD

    average = total / len(values)
    return average if math.isfinite(average) else NEUTRAL_MOOD


def mood_trend(entries: Iterable[Any], min_delta: float = DEFAULT_TREND_DELTA) -> MoodTrend:
    """Classify the direction of mood change.

    Invalid levels are dropped first. The later half of the remaining levels
    is compared with the earlier half; with an odd count the middle one
    belongs to neither half.

    Args:
        entries: Entries ordered oldest to newest.
        min_delta: Difference of half means needed to leave ``stable``.

    Returns:
        IMPROVING if the later half exceeds the earlier by more than
        ``min_delta``, DECLINING if it is lower by more than ``min_delta``,
        STABLE otherwise (including windows with fewer than 2 valid levels).
    """
    values = _valid_levels(entries)
    if len(values) < 2:
        return MoodTrend.STABLE

    half = len(values) // 2
    difference = average_mood(values[-half:]) - average_mood(values[:half])

    if difference > min_delta:
        return MoodTrend.IMPROVING
    if difference < -min_delta:
        return MoodTrend.DECLINING
    return MoodTrend.STABLE


def most_frequent_mood(entries: Iterable[Any]) -> MoodLevel:
    """Get the most frequent mood level.

    Levels are read the way ``average_mood`` reads them; non-integral values
    are skipped. Ties go to the higher (happier) level. Returns NEUTRAL when
    there are no valid levels.
    """
    counts: Counter[MoodLevel] = Counter()
    for item in entries:
        value = _level_value(item)
        if value is None or not value.is_integer():
            continue
        counts[MoodLevel(int(value))] += 1

    if not counts:
        return MoodLevel.NEUTRAL
    level, _ = max(counts.items(), key=lambda item: (item[1], item[0]))
    return level


def mood_for_date(
    entries: Iterable[MoodEntry],
    day: DateLike,
    calendar: Optional[LocalCalendar] = None,
) -> Optional[MoodEntry]:
    """Find the mood entry for a calendar day.

    If several entries fall on the same day, the one created last wins;
    entries created at the same instant are ordered by ID.

    Args:
        entries: Mood entries to search.
        day: Day to look up.
        calendar: Calendar defining day boundaries.

    Returns:
        The matching entry, or None.
    """
    calendar = calendar or LocalCalendar()
    target = calendar.day_of(day)
    matches = [e for e in entries if calendar.day_of(e.date) == target]
    if not matches:
        return None
    return max(matches, key=lambda e: (e.created_at.timestamp(), e.id))


def bucket_by_month(
    entries: Iterable[MoodEntry],
    reference: DateLike,
    calendar: Optional[LocalCalendar] = None,
) -> list[MoodEntry]:
    """Entries in the same calendar month as ``reference``, in input order."""
    calendar = calendar or LocalCalendar()
    return [e for e in entries if calendar.same_month(e.date, reference)]


def bucket_by_year(
    entries: Iterable[MoodEntry],
    reference: DateLike,
    calendar: Optional[LocalCalendar] = None,
) -> list[MoodEntry]:
    """Entries in the same calendar year as ``reference``, in input order."""
    calendar = calendar or LocalCalendar()
    return [e for e in entries if calendar.same_year(e.date, reference)]


def partition_by_month(
    entries: Iterable[MoodEntry],
    reference: DateLike,
    calendar: Optional[LocalCalendar] = None,
) -> tuple[list[MoodEntry], list[MoodEntry]]:
    """Split entries into (in the month of ``reference``, everything else)."""
    calendar = calendar or LocalCalendar()
    inside, outside = [], []
    for entry in entries:
        (inside if calendar.same_month(entry.date, reference) else outside).append(entry)
    return inside, outside


def entries_for_week(
    entries: Iterable[MoodEntry],
    week_start: DateLike,
    calendar: Optional[LocalCalendar] = None,
) -> list[MoodEntry]:
    """Entries whose day falls in the 7 days starting at ``week_start``.

    Returns:
        Matching entries sorted oldest to newest.
    """
    calendar = calendar or LocalCalendar()
    start = calendar.day_of(week_start)
    end = start + timedelta(days=7)
    week = [e for e in entries if start <= calendar.day_of(e.date) < end]
    return sorted(week, key=lambda e: _chronological_key(e, calendar))


def mood_variation(entries: Iterable[Any]) -> float:
    """Population standard deviation of mood levels (0.0 if empty)."""
    values = _valid_levels(entries)
    if not values:
        return 0.0
    mean = math.fsum(values) / len(values)
    variance = math.fsum((v - mean) ** 2 for v in values) / len(values)
    return math.sqrt(variance)


def consecutive_positive_days(entries: Iterable[Any], threshold: int = POSITIVE_LEVEL) -> int:
    """Longest run of entries at or above ``threshold``.

    Args:
        entries: Entries ordered oldest to newest.
        threshold: Lowest level that counts as positive.
    """
    longest = 0
    current = 0
    for item in entries:
        value = _level_value(item)
        if value is not None and value >= threshold:
            current += 1
            longest = max(longest, current)
        else:
            current = 0
    return longest


def weekend_average(
    entries: Iterable[MoodEntry],
    calendar: Optional[LocalCalendar] = None,
) -> Optional[float]:
    """Average mood on Saturdays and Sundays, or None without weekend entries."""
    calendar = calendar or LocalCalendar()
    weekend = [e for e in entries if calendar.is_weekend(e.date)]
    return average_mood(weekend) if weekend else None


def weekday_average(
    entries: Iterable[MoodEntry],
    calendar: Optional[LocalCalendar] = None,
) -> Optional[float]:
    """Average mood Monday to Friday, or None without weekday entries."""
    calendar = calendar or LocalCalendar()
    weekdays = [e for e in entries if not calendar.is_weekend(e.date)]
    return average_mood(weekdays) if weekdays else None

