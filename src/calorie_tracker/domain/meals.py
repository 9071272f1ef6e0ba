"""Domain models for meals and meal logging."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class MealItem(BaseModel):
    """Single food item with its estimated calories."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    calories: int = Field(ge=0)


class Meal(BaseModel):
    """Analyzed meal as returned by the analysis gateway.

    ``total_calories`` is taken verbatim from the gateway and is not
    recomputed from ``items``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    total_calories: int = Field(alias="totalCalories", ge=0)
    items: tuple[MealItem, ...] = Field(default_factory=tuple)

    def items_calories(self) -> int:
        """Return the sum of item calories."""
        return sum(item.calories for item in self.items)


class LoggedMeal(Meal):
    """Meal accepted into the log with its id and logging instant."""

    id: int
    date: datetime

    def to_payload(self) -> dict[str, object]:
        """Return the persisted JSON representation."""
        return self.model_dump(mode="json", by_alias=True)
