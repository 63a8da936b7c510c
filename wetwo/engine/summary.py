"""Weekly mood summary."""

from typing import Iterable, Optional

from wetwo.engine.aggregation import (
    DEFAULT_TREND_DELTA,
    average_mood,
    entries_for_week,
    mood_trend,
    most_frequent_mood,
)
from wetwo.engine.calendar import DateLike, LocalCalendar
from wetwo.engine.insights import InsightProvider, RuleBasedInsights
from wetwo.models import MoodEntry, WeeklyMoodSummary


def build_weekly_summary(
    entries: Iterable[MoodEntry],
    week_start: DateLike,
    calendar: Optional[LocalCalendar] = None,
    insights: Optional[InsightProvider] = None,
    min_delta: float = DEFAULT_TREND_DELTA,
) -> WeeklyMoodSummary:
    """Build the summary for the week containing ``week_start``.

    Args:
        entries: Mood entries; only those in the week are used.
        week_start: Any day in the week. It is aligned to the calendar's
            first weekday.
        calendar: Calendar defining day and week boundaries.
        insights: Provider of insight texts. Defaults to RuleBasedInsights.
        min_delta: Trend threshold passed to ``mood_trend``.

    Returns:
        WeeklyMoodSummary for the week.
    """
    calendar = calendar or LocalCalendar()
    insights = insights or RuleBasedInsights()

    start = calendar.week_start(week_start)
    week = entries_for_week(entries, start, calendar)

    average = average_mood(week)
    trend = mood_trend(week, min_delta=min_delta)

    return WeeklyMoodSummary(
        week_start_date=start,
        average_mood=average,
        mood_trend=trend,
        most_frequent_mood=most_frequent_mood(week),
        insights=insights.insights(week, average, trend, calendar),
        entry_count=len(week),
    )
