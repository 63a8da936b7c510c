"""Mood aggregation engine for WeTwo."""

from wetwo.engine.calendar import LocalCalendar
from wetwo.engine.aggregation import (
    DEFAULT_TREND_DELTA,
    NEUTRAL_MOOD,
    average_mood,
    bucket_by_month,
    bucket_by_year,
    consecutive_positive_days,
    entries_for_week,
    mood_for_date,
    mood_trend,
    mood_variation,
    most_frequent_mood,
    partition_by_month,
    weekday_average,
    weekend_average,
)
from wetwo.engine.insights import InsightProvider, InsightRules, RuleBasedInsights
from wetwo.engine.summary import build_weekly_summary

__all__ = [
    "DEFAULT_TREND_DELTA",
    "InsightProvider",
    "InsightRules",
    "LocalCalendar",
    "NEUTRAL_MOOD",
    "RuleBasedInsights",
    "average_mood",
    "bucket_by_month",
    "bucket_by_year",
    "build_weekly_summary",
    "consecutive_positive_days",
    "entries_for_week",
    "mood_for_date",
    "mood_trend",
    "mood_variation",
    "most_frequent_mood",
    "partition_by_month",
    "weekday_average",
    "weekend_average",
]
