"""Theme preference service."""

from dataclasses import dataclass
from typing import Protocol

from calorie_tracker.domain.theme import Theme


class ThemeRepository(Protocol):
    """Persistence interface for the theme preference."""

    def load_theme(self) -> Theme | None:
        """Return the stored theme, if any."""

    def save_theme(self, theme: Theme) -> None:
        """Persist the theme."""

    def clear_theme(self) -> None:
        """Remove the stored theme."""


@dataclass
class ThemeService:
    """Service for the persisted light/dark preference."""

    repository: ThemeRepository
    prefers_dark: bool = False

    def current(self) -> Theme:
        """Return the stored theme or the system preference when unset."""
        return self.repository.load_theme() or self.default()

    def default(self) -> Theme:
        """Return the theme derived from the system preference."""
        return Theme.DARK if self.prefers_dark else Theme.LIGHT

    def set(self, theme: Theme) -> Theme:
        """Persist and return the theme."""
        self.repository.save_theme(theme)
        return theme

    def toggle(self) -> Theme:
        """Switch between light and dark."""
        return self.set(self.current().toggled())

    def clear(self) -> None:
        """Forget the stored theme."""
        self.repository.clear_theme()
