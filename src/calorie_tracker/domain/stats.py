"""Domain models for derived calorie statistics."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class DailyCalories:
    """Calories consumed on one calendar day."""

    day: date
    day_label: str
    calories: int


@dataclass(frozen=True)
class TodaySummary:
    """Today's consumption measured against the daily target."""

    day: date
    consumed: int
    target: int
    remaining: int
    percentage: float
