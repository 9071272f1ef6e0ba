"""Domain model for the display theme preference."""

from enum import Enum


class Theme(str, Enum):
    """Persisted light/dark preference."""

    LIGHT = "light"
    DARK = "dark"

    def toggled(self) -> "Theme":
        """Return the opposite theme."""
        return Theme.DARK if self is Theme.LIGHT else Theme.LIGHT
