"""Statistics derived from the meal log."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta, tzinfo

from calorie_tracker.domain.meals import LoggedMeal
from calorie_tracker.domain.stats import DailyCalories, TodaySummary
from calorie_tracker.services.meals import MealLogService

TREND_DAYS = 7

_DAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class StatsService:
    """Calendar-day aggregates of logged meals.

    A ``timezone`` of None buckets days in the host's local zone.
    """

    meal_log_service: MealLogService
    timezone: tzinfo | None
    clock: Callable[[], datetime] = _utc_now

    def today(self) -> date:
        """Return today's date in the configured time zone."""
        return _local_date(self.clock(), self.timezone)

    def today_meals(self) -> list[LoggedMeal]:
        """Return meals logged on today's calendar date."""
        today = self.today()
        return [
            meal
            for meal in self.meal_log_service.all()
            if _local_date(meal.date, self.timezone) == today
        ]

    def consumed_today(self) -> int:
        """Return total calories logged today."""
        return sum(meal.total_calories for meal in self.today_meals())

    def today_summary(self, target: int) -> TodaySummary:
        """Return today's consumption against the target."""
        consumed = self.consumed_today()
        percentage = min(consumed / target * 100, 100.0) if target > 0 else 0.0
        return TodaySummary(
            day=self.today(),
            consumed=consumed,
            target=target,
            remaining=max(0, target - consumed),
            percentage=percentage,
        )

    def weekly_trend(self) -> list[DailyCalories]:
        """Return calories per day for the last seven days, oldest first."""
        today = self.today()
        days = [
            today - timedelta(days=offset) for offset in range(TREND_DAYS - 1, -1, -1)
        ]
        totals = dict.fromkeys(days, 0)
        for meal in self.meal_log_service.all():
            day = _local_date(meal.date, self.timezone)
            if day in totals:
                totals[day] += meal.total_calories
        return [
            DailyCalories(
                day=day, day_label=_DAY_LABELS[day.weekday()], calories=totals[day]
            )
            for day in days
        ]


def _local_date(value: datetime, tz: tzinfo | None) -> date:
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(tz).date()
