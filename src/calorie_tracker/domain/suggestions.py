"""Domain models for meal-plan suggestions."""

from pydantic import BaseModel, ConfigDict, Field


class MealSuggestion(BaseModel):
    """Suggested meal for a one-day plan."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    meal_type: str = Field(alias="mealType")
    name: str
    calories: int = Field(ge=0)


class SuggestionPlan(BaseModel):
    """Structured output of the suggestion gateway."""

    suggestions: list[MealSuggestion]
