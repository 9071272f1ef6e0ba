"""Meal-plan suggestion gateway with stale-result protection."""

import logging
from dataclasses import dataclass, field

from calorie_tracker.domain.profile import Profile
from calorie_tracker.domain.suggestions import MealSuggestion, SuggestionPlan
from calorie_tracker.services.llm import StructuredOutputClient, text_part

FAILURE_MESSAGE = "Failed to get meal suggestions. Please try again."

SUGGESTION_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "suggestions": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "mealType": {"type": "string"},
                    "name": {"type": "string"},
                    "calories": {"type": "integer", "minimum": 0},
                },
                "required": ["mealType", "name", "calories"],
                "additionalProperties": False,
            },
        }
    },
    "required": ["suggestions"],
    "additionalProperties": False,
}

_logger = logging.getLogger(__name__)


@dataclass
class SuggestionService:
    """Fetches and caches a one-day meal plan for the live profile.

    Every refresh and every invalidation bumps a generation counter. A
    response that arrives after the counter moved on belongs to a
    superseded request and is dropped instead of overwriting the cache.
    """

    client: StructuredOutputClient
    model: str
    reasoning_effort: str | None
    store: bool
    last_error: str | None = field(default=None, init=False)
    _suggestions: list[MealSuggestion] = field(default_factory=list, init=False)
    _generation: int = field(default=0, init=False)

    @property
    def generation(self) -> int:
        """Return the current request generation."""
        return self._generation

    def current(self) -> tuple[MealSuggestion, ...]:
        """Return the cached suggestions."""
        return tuple(self._suggestions)

    def invalidate(self) -> None:
        """Drop cached suggestions and orphan any in-flight request."""
        self._generation += 1
        self._suggestions = []
        self.last_error = None

    async def refresh(self, profile: Profile, target: int) -> list[MealSuggestion]:
        """Request a new plan and cache it unless it has gone stale."""
        self._generation += 1
        generation = self._generation
        try:
            suggestions = await self.fetch(profile, target)
        except Exception:
            _logger.exception("Failed to get meal suggestions")
            if generation != self._generation:
                return list(self._suggestions)
            self._suggestions = []
            self.last_error = FAILURE_MESSAGE
            return []
        if generation != self._generation:
            _logger.info(
                "Discarding stale meal suggestions (generation %s, current %s)",
                generation,
                self._generation,
            )
            return list(self._suggestions)
        self._suggestions = suggestions
        self.last_error = None
        return list(suggestions)

    async def fetch(self, profile: Profile, target: int) -> list[MealSuggestion]:
        """Call the suggestion model without touching the cache."""
        prompt = (
            f"I am a {profile.age}-year-old {profile.gender.value}, weighing "
            f"{profile.weight:g} kg at {profile.height:g} cm tall. My goal is to "
            f"{profile.goal.value} weight and my activity level is "
            f"{profile.activity_level.value}. My daily calorie target is "
            f"{target} kcal. Suggest a one-day meal plan with breakfast, lunch "
            "and dinner that fits this target. Give each meal a type, a name "
            "and estimated calories."
        )
        raw = await self.client.generate(
            model=self.model,
            reasoning_effort=self.reasoning_effort,
            store=self.store,
            content=[text_part(prompt)],
            schema=SUGGESTION_SCHEMA,
            schema_name="meal_suggestions",
        )
        return SuggestionPlan.model_validate(raw).suggestions
