"""Meal log service."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol

from calorie_tracker.domain.meals import LoggedMeal, Meal

_logger = logging.getLogger(__name__)


class MealLogRepository(Protocol):
    """Persistence interface for the meal log."""

    def load_meals(self) -> list[LoggedMeal]:
        """Return persisted meals in insertion order."""

    def save_meals(self, meals: list[LoggedMeal]) -> None:
        """Persist the full ordered meal log."""

    def clear_meals(self) -> None:
        """Remove the persisted meal log."""


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class MealLogService:
    """Owns the ordered log of accepted meals."""

    repository: MealLogRepository
    clock: Callable[[], datetime] = _utc_now
    _meals: list[LoggedMeal] = field(default_factory=list, init=False)
    _last_id: int = field(default=0, init=False)

    def load(self) -> tuple[LoggedMeal, ...]:
        """Replace in-memory meals with the persisted log."""
        self._meals = list(self.repository.load_meals())
        newest = max((meal.id for meal in self._meals), default=0)
        self._last_id = max(self._last_id, newest)
        _logger.info("Loaded %s logged meals", len(self._meals))
        return self.all()

    def add(self, meal: Meal) -> LoggedMeal:
        """Log a meal at the current instant and return the stored entry."""
        logged_at = self.clock()
        logged = LoggedMeal(
            id=self._next_id(logged_at),
            date=logged_at,
            total_calories=meal.total_calories,
            items=meal.items,
        )
        self._meals.append(logged)
        self.repository.save_meals(self._meals)
        return logged

    def remove(self, meal_id: int) -> bool:
        """Remove a meal by id; return False when no such meal exists."""
        remaining = [meal for meal in self._meals if meal.id != meal_id]
        if len(remaining) == len(self._meals):
            return False
        self._meals = remaining
        self.repository.save_meals(self._meals)
        return True

    def all(self) -> tuple[LoggedMeal, ...]:
        """Return all logged meals in insertion order."""
        return tuple(self._meals)

    def clear(self) -> None:
        """Drop every logged meal."""
        self._meals = []
        self.repository.clear_meals()

    def _next_id(self, logged_at: datetime) -> int:
        candidate = int(logged_at.timestamp() * 1000)
        if candidate <= self._last_id:
            candidate = self._last_id + 1
        self._last_id = candidate
        return candidate
