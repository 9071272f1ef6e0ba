"""Domain models for the user profile."""

from dataclasses import dataclass
from enum import Enum


class Gender(str, Enum):
    """Biological sex used by the BMR equation."""

    MALE = "male"
    FEMALE = "female"


class Goal(str, Enum):
    """Weight goal driving the calorie adjustment."""

    LOSE = "lose"
    MAINTAIN = "maintain"
    GAIN = "gain"


class ActivityLevel(str, Enum):
    """Self-reported activity level."""

    SEDENTARY = "sedentary"
    LIGHT = "light"
    MODERATE = "moderate"
    ACTIVE = "active"
    VERY_ACTIVE = "veryActive"


@dataclass(frozen=True)
class Profile:
    """Biometric and goal profile of the single tracked user."""

    age: int
    weight: float
    height: float
    gender: Gender
    goal: Goal
    activity_level: ActivityLevel

    def to_payload(self) -> dict[str, object]:
        """Return the persisted JSON representation."""
        return {
            "age": self.age,
            "weight": self.weight,
            "height": self.height,
            "gender": self.gender.value,
            "goal": self.goal.value,
            "activityLevel": self.activity_level.value,
        }

    @classmethod
    def from_payload(cls, payload: dict[str, object]) -> "Profile":
        """Build a profile from its persisted representation.

        Raises ``KeyError``, ``TypeError`` or ``ValueError`` for malformed data.
        """
        return cls(
            age=int(payload["age"]),
            weight=float(payload["weight"]),
            height=float(payload["height"]),
            gender=Gender(payload["gender"]),
            goal=Goal(payload["goal"]),
            activity_level=ActivityLevel(payload["activityLevel"]),
        )


@dataclass(frozen=True)
class EnergyBreakdown:
    """Intermediate and final values of the energy model."""

    bmr: float
    tdee: float
    target: int
