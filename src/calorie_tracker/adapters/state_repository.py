"""Key-value backed repositories for profile, meal log and theme."""

import logging
from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError

from calorie_tracker.domain.meals import LoggedMeal
from calorie_tracker.domain.profile import Profile
from calorie_tracker.domain.theme import Theme
from calorie_tracker.services.meals import MealLogRepository
from calorie_tracker.services.profiles import ProfileRepository
from calorie_tracker.services.theme import ThemeRepository

PROFILE_KEY = "userProfile"
MEALS_KEY = "loggedMeals"
THEME_KEY = "theme"

_logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Minimal JSON key-value storage."""

    def get(self, key: str) -> object | None:
        """Return the JSON value stored under key, if any."""

    def set(self, key: str, value: object) -> None:
        """Store a JSON value under key."""

    def delete(self, key: str) -> None:
        """Remove key if present."""


@dataclass
class StateRepository(ProfileRepository, MealLogRepository, ThemeRepository):
    """Maps domain records onto three independent key-value records.

    Unreadable or malformed records are logged and treated as absent.
    """

    store: KeyValueStore

    def load_profile(self) -> Profile | None:
        """Return the stored profile."""
        raw = self._read(PROFILE_KEY)
        if raw is None:
            return None
        if not isinstance(raw, dict):
            _logger.warning("Stored %s is not an object; ignoring it", PROFILE_KEY)
            return None
        try:
            return Profile.from_payload(raw)
        except (KeyError, TypeError, ValueError) as exc:
            _logger.warning("Stored %s is malformed: %s", PROFILE_KEY, exc)
            return None

    def save_profile(self, profile: Profile) -> None:
        """Persist the profile."""
        self.store.set(PROFILE_KEY, profile.to_payload())

    def clear_profile(self) -> None:
        """Remove the stored profile."""
        self.store.delete(PROFILE_KEY)

    def load_meals(self) -> list[LoggedMeal]:
        """Return the stored meal log."""
        raw = self._read(MEALS_KEY)
        if raw is None:
            return []
        if not isinstance(raw, list):
            _logger.warning("Stored %s is not a list; ignoring it", MEALS_KEY)
            return []
        try:
            return [LoggedMeal.model_validate(row) for row in raw]
        except ValidationError as exc:
            _logger.warning("Stored %s is malformed: %s", MEALS_KEY, exc)
            return []

    def save_meals(self, meals: list[LoggedMeal]) -> None:
        """Persist the full meal log."""
        self.store.set(MEALS_KEY, [meal.to_payload() for meal in meals])

    def clear_meals(self) -> None:
        """Remove the stored meal log."""
        self.store.delete(MEALS_KEY)

    def load_theme(self) -> Theme | None:
        """Return the stored theme."""
        raw = self._read(THEME_KEY)
        if raw is None:
            return None
        try:
            return Theme(raw)
        except ValueError:
            _logger.warning("Stored %s %r is not a known theme", THEME_KEY, raw)
            return None

    def save_theme(self, theme: Theme) -> None:
        """Persist the theme."""
        self.store.set(THEME_KEY, theme.value)

    def clear_theme(self) -> None:
        """Remove the stored theme."""
        self.store.delete(THEME_KEY)

    def _read(self, key: str) -> object | None:
        try:
            return self.store.get(key)
        except Exception:
            _logger.warning("Failed to read %s from storage", key, exc_info=True)
            return None
