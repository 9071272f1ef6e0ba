"""Profile lifecycle service."""

import logging
import math
from dataclasses import dataclass, field
from typing import Protocol

from calorie_tracker.domain.profile import EnergyBreakdown, Profile
from calorie_tracker.errors import ProfileMissingError, ProfileValidationError
from calorie_tracker.services.energy import compute_energy
from calorie_tracker.services.meals import MealLogService
from calorie_tracker.services.suggestions import SuggestionService
from calorie_tracker.services.theme import ThemeService

_logger = logging.getLogger(__name__)


class ProfileRepository(Protocol):
    """Persistence interface for the user profile."""

    def load_profile(self) -> Profile | None:
        """Return the stored profile, if any."""

    def save_profile(self, profile: Profile) -> None:
        """Persist the profile."""

    def clear_profile(self) -> None:
        """Remove the stored profile."""


def validate_profile(profile: Profile) -> EnergyBreakdown:
    """Check the biometrics and return the energy breakdown they produce.

    Raises ProfileValidationError unless age, weight and height are positive
    and finite and the energy model yields a finite result.
    """
    # Written as "not > 0" so NaN is rejected too.
    if not (profile.age > 0 and profile.weight > 0 and profile.height > 0):
        raise ProfileValidationError
    if not (math.isfinite(profile.weight) and math.isfinite(profile.height)):
        raise ProfileValidationError
    try:
        energy = compute_energy(profile)
    except (OverflowError, ValueError) as exc:
        raise ProfileValidationError from exc
    if not math.isfinite(energy.tdee):
        raise ProfileValidationError
    return energy


@dataclass
class ProfileService:
    """Holds the single live profile and its derived calorie target.

    A new profile starts a fresh tracking history, so submitting one clears
    the meal log and the cached suggestions.
    """

    repository: ProfileRepository
    meal_log_service: MealLogService
    suggestion_service: SuggestionService
    theme_service: ThemeService
    _profile: Profile | None = field(default=None, init=False)
    _energy: EnergyBreakdown | None = field(default=None, init=False)

    def load(self) -> Profile | None:
        """Load the persisted profile and recompute its target."""
        profile = self.repository.load_profile()
        if profile is None:
            return None
        try:
            energy = validate_profile(profile)
        except ProfileValidationError:
            _logger.warning("Ignoring stored profile with invalid biometrics")
            return None
        self._profile = profile
        self._energy = energy
        return profile

    def submit(self, profile: Profile) -> EnergyBreakdown:
        """Validate and store a new profile, resetting dependent state."""
        energy = validate_profile(profile)
        self.repository.save_profile(profile)
        self._profile = profile
        self._energy = energy
        self.meal_log_service.clear()
        self.suggestion_service.invalidate()
        _logger.info("Profile submitted; daily target is %s kcal", energy.target)
        return energy

    def reset(self) -> None:
        """Return to the initial state with no profile."""
        self.repository.clear_profile()
        self._profile = None
        self._energy = None
        self.meal_log_service.clear()
        self.suggestion_service.invalidate()
        self.theme_service.clear()
        _logger.info("Profile reset")

    def current(self) -> Profile | None:
        """Return the live profile, if any."""
        return self._profile

    def energy(self) -> EnergyBreakdown | None:
        """Return the energy breakdown for the live profile, if any."""
        return self._energy

    def target(self) -> int | None:
        """Return the cached daily target, if a profile is set."""
        return self._energy.target if self._energy else None

    def require(self) -> tuple[Profile, EnergyBreakdown]:
        """Return the live profile and energy or raise ProfileMissingError."""
        if self._profile is None or self._energy is None:
            raise ProfileMissingError
        return self._profile, self._energy
