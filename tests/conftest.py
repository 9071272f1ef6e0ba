"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from pathlib import Path
from zoneinfo import ZoneInfo

import pytest

from calorie_tracker.adapters.state_repository import KeyValueStore, StateRepository
from calorie_tracker.config import Settings
from calorie_tracker.containers import AppContainer
from calorie_tracker.domain.meals import Meal, MealItem
from calorie_tracker.domain.profile import ActivityLevel, Gender, Goal, Profile
from calorie_tracker.services.analysis import AnalysisService
from calorie_tracker.services.llm import StructuredOutputClient
from calorie_tracker.services.meals import MealLogService
from calorie_tracker.services.profiles import ProfileService
from calorie_tracker.services.stats import StatsService
from calorie_tracker.services.suggestions import SuggestionService
from calorie_tracker.services.theme import ThemeService

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)


@dataclass
class InMemoryStore(KeyValueStore):
    """In-memory key-value store for tests."""

    data: dict[str, object] = field(default_factory=dict)
    writes: list[str] = field(default_factory=list)

    def get(self, key: str) -> object | None:
        return self.data.get(key)

    def set(self, key: str, value: object) -> None:
        self.writes.append(key)
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.writes.append(key)
        self.data.pop(key, None)


@dataclass
class BrokenStore(KeyValueStore):
    """Store whose reads always fail."""

    def get(self, key: str) -> object | None:
        raise OSError("disk unavailable")

    def set(self, key: str, value: object) -> None:
        return None

    def delete(self, key: str) -> None:
        return None


@dataclass
class FakeStructuredClient(StructuredOutputClient):
    """Fake LLM client returning canned payloads by schema name."""

    responses: dict[str, dict[str, object]] = field(
        default_factory=lambda: {
            "meal_analysis": {
                "totalCalories": 650,
                "items": [
                    {"name": "grilled chicken", "calories": 300},
                    {"name": "rice", "calories": 250},
                    {"name": "salad", "calories": 100},
                ],
            },
            "meal_suggestions": {
                "suggestions": [
                    {"mealType": "Breakfast", "name": "Oatmeal", "calories": 450},
                    {"mealType": "Lunch", "name": "Chicken wrap", "calories": 800},
                    {"mealType": "Dinner", "name": "Salmon bowl", "calories": 900},
                ]
            },
        }
    )
    error: Exception | None = None
    calls: list[dict[str, object]] = field(default_factory=list)

    async def generate(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        content: list[dict[str, object]],
        schema: dict[str, object],
        schema_name: str,
    ) -> dict[str, object]:
        self.calls.append(
            {"model": model, "content": content, "schema_name": schema_name}
        )
        if self.error is not None:
            raise self.error
        return self.responses[schema_name]


@dataclass
class MutableClock:
    """Callable clock that tests can move."""

    now: datetime = NOW

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


def make_profile(**overrides: object) -> Profile:
    values: dict[str, object] = {
        "age": 30,
        "weight": 70.0,
        "height": 175.0,
        "gender": Gender.MALE,
        "goal": Goal.MAINTAIN,
        "activity_level": ActivityLevel.MODERATE,
    }
    values.update(overrides)
    return Profile(**values)  # type: ignore[arg-type]


def make_meal(total: int, *items: tuple[str, int]) -> Meal:
    return Meal(
        total_calories=total,
        items=[MealItem(name=name, calories=calories) for name, calories in items],
    )


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        openai_api_key="openai-key",
        state_path=tmp_path / "state.json",
        timezone="UTC",
    )


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def state_repository(store: InMemoryStore) -> StateRepository:
    return StateRepository(store)


@pytest.fixture
def clock() -> MutableClock:
    return MutableClock()


@pytest.fixture
def llm_client() -> FakeStructuredClient:
    return FakeStructuredClient()


@pytest.fixture
def meal_log_service(
    state_repository: StateRepository, clock: MutableClock
) -> MealLogService:
    return MealLogService(state_repository, clock=clock)


@pytest.fixture
def suggestion_service(llm_client: FakeStructuredClient) -> SuggestionService:
    return SuggestionService(
        client=llm_client, model="suggest-model", reasoning_effort=None, store=False
    )


@pytest.fixture
def theme_service(state_repository: StateRepository) -> ThemeService:
    return ThemeService(state_repository)


@pytest.fixture
def profile_service(
    state_repository: StateRepository,
    meal_log_service: MealLogService,
    suggestion_service: SuggestionService,
    theme_service: ThemeService,
) -> ProfileService:
    return ProfileService(
        repository=state_repository,
        meal_log_service=meal_log_service,
        suggestion_service=suggestion_service,
        theme_service=theme_service,
    )


@pytest.fixture
def stats_service(
    meal_log_service: MealLogService, clock: MutableClock
) -> StatsService:
    return StatsService(
        meal_log_service=meal_log_service, timezone=ZoneInfo("UTC"), clock=clock
    )


@pytest.fixture
def container(  # noqa: PLR0913
    settings: Settings,
    llm_client: FakeStructuredClient,
    profile_service: ProfileService,
    meal_log_service: MealLogService,
    stats_service: StatsService,
    suggestion_service: SuggestionService,
    theme_service: ThemeService,
) -> AppContainer:
    analysis_service = AnalysisService(
        client=llm_client, model="analysis-model", reasoning_effort=None, store=False
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        profile_service=profile_service,
        meal_log_service=meal_log_service,
        stats_service=stats_service,
        analysis_service=analysis_service,
        suggestion_service=suggestion_service,
        theme_service=theme_service,
        close_resources=close_resources,
    )
