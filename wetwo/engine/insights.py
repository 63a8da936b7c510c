"""Insight and recommendation texts for weekly mood summaries.

Thresholds and texts live in ``InsightRules`` so they can be tuned from the
``[insights]`` table of the config file.
"""

from abc import ABC, abstractmethod
from typing import Literal

from pydantic import BaseModel, Field

from wetwo.engine.aggregation import (
    consecutive_positive_days,
    mood_variation,
    weekday_average,
    weekend_average,
)
from wetwo.engine.calendar import LocalCalendar
from wetwo.models import MoodEntry, MoodTrend, WeeklyMoodSummary

MoodBand = Literal["low", "balanced", "high"]


class InsightMessages(BaseModel):
    """Texts used for insights, recommendations and trend descriptions."""

    no_entries: str = "No mood entries recorded this week"
    consistent: str = "Your mood has been very consistent this week"
    variable: str = "Your mood has varied significantly this week"
    positive_streak: str = "You've had {days} consecutive positive days!"
    better_weekends: str = "Your mood is significantly better on weekends"
    better_weekdays: str = "Your mood is better during weekdays"
    band_low: str = "This week has been emotionally challenging"
    band_balanced: str = "Your mood has been balanced this week"
    band_high: str = "You've had an excellent week emotionally!"

    recommend_low: list[str] = [
        "Try to schedule some quality time with your partner this weekend",
        "Consider sharing your feelings more openly with your partner",
    ]
    recommend_balanced: list[str] = [
        "Your mood is balanced - perfect time for meaningful conversations",
        "Try a new activity together to keep things exciting",
    ]
    recommend_high: list[str] = [
        "Your positive energy is contagious! Share it with your partner",
        "Plan a special date night to celebrate your good mood",
    ]
    recommend_declining: str = "Reach out to your partner for support and understanding"

    trend_improving: str = (
        "Your mood has been getting better throughout the week. Keep up the positive energy!"
    )
    trend_stable: str = (
        "Your mood has been consistent this week. You're maintaining good emotional balance."
    )
    trend_declining: str = (
        "Your mood has been trending downward. "
        "Consider talking to your partner about what's on your mind."
    )


class InsightRules(BaseModel):
    """Thresholds for insight generation."""

    consistent_below: float = Field(default=1.0, ge=0, description="Std dev below which mood is consistent")
    variable_above: float = Field(default=1.5, ge=0, description="Std dev above which mood is variable")
    positive_level: int = Field(default=4, ge=1, le=5, description="Lowest level counted as positive")
    positive_streak_min: int = Field(default=3, ge=1, description="Streak length worth mentioning")
    weekend_delta: float = Field(default=0.5, ge=0, description="Weekend/weekday gap worth mentioning")
    low_band_below: float = Field(default=3.0, description="Averages below this are 'low'")
    high_band_above: float = Field(default=4.0, description="Averages above this are 'high'")
    messages: InsightMessages = Field(default_factory=InsightMessages)

    model_config = {"frozen": True}

    def band(self, average: float) -> MoodBand:
        if average < self.low_band_below:
            return "low"
        if average > self.high_band_above:
            return "high"
        return "balanced"


class InsightProvider(ABC):
    """Turns weekly statistics into human-readable text."""

    @abstractmethod
    def insights(
        self,
        entries: list[MoodEntry],
        average: float,
        trend: MoodTrend,
        calendar: LocalCalendar,
    ) -> list[str]:
        """Ordered observations for a week of entries (oldest first)."""
        pass

    @abstractmethod
    def recommendations(self, summary: WeeklyMoodSummary) -> list[str]:
        """Suggestions based on a finished summary."""
        pass

    @abstractmethod
    def describe_trend(self, trend: MoodTrend) -> str:
        """One-sentence description of a trend."""
        pass


class RuleBasedInsights(InsightProvider):
    """Insight provider driven by ``InsightRules``."""

    def __init__(self, rules: InsightRules | None = None):
        self.rules = rules or InsightRules()

    def insights(
        self,
        entries: list[MoodEntry],
        average: float,
        trend: MoodTrend,
        calendar: LocalCalendar,
    ) -> list[str]:
        rules = self.rules
        messages = rules.messages

        if not entries:
            return [messages.no_entries]

        result = []

        variation = mood_variation(entries)
        if variation < rules.consistent_below:
            result.append(messages.consistent)
        elif variation > rules.variable_above:
            result.append(messages.variable)

        streak = consecutive_positive_days(entries, threshold=rules.positive_level)
        if streak >= rules.positive_streak_min:
            result.append(messages.positive_streak.format(days=streak))

        weekend = weekend_average(entries, calendar)
        weekday = weekday_average(entries, calendar)
        if weekend is not None and weekday is not None:
            if weekend > weekday + rules.weekend_delta:
                result.append(messages.better_weekends)
            elif weekday > weekend + rules.weekend_delta:
                result.append(messages.better_weekdays)

        result.append(getattr(messages, f"band_{rules.band(average)}"))
        return result

    def recommendations(self, summary: WeeklyMoodSummary) -> list[str]:
        messages = self.rules.messages
        result = list(getattr(messages, f"recommend_{self.rules.band(summary.average_mood)}"))
        if summary.mood_trend == MoodTrend.DECLINING:
            result.append(messages.recommend_declining)
        return result

    def describe_trend(self, trend: MoodTrend) -> str:
        return getattr(self.rules.messages, f"trend_{trend.value}")
