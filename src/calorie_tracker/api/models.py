"""Request models for the HTTP API."""

from pydantic import BaseModel, ConfigDict, Field

from calorie_tracker.domain.profile import ActivityLevel, Gender, Goal, Profile
from calorie_tracker.domain.theme import Theme


class ProfileRequest(BaseModel):
    """Submitted profile form.

    Range checks live in the profile service so that a bad submission is
    reported with the same message however it arrives.
    """

    model_config = ConfigDict(populate_by_name=True)

    age: int
    weight: float
    height: float
    gender: Gender
    goal: Goal
    activity_level: ActivityLevel = Field(alias="activityLevel")

    def to_profile(self) -> Profile:
        """Convert to the domain profile."""
        return Profile(
            age=self.age,
            weight=self.weight,
            height=self.height,
            gender=self.gender,
            goal=self.goal,
            activity_level=self.activity_level,
        )


class TextAnalysisRequest(BaseModel):
    """Free-text meal description to analyze."""

    description: str


class ThemeRequest(BaseModel):
    """Theme to store."""

    theme: Theme
