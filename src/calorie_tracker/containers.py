"""Dependency container wiring for the application."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from calorie_tracker.adapters.json_file_store import JsonFileStore
from calorie_tracker.adapters.openai_client import OpenAIStructuredClient
from calorie_tracker.adapters.state_repository import KeyValueStore, StateRepository
from calorie_tracker.adapters.supabase_store import SupabaseKeyValueStore
from calorie_tracker.config import Settings, resolve_timezone
from calorie_tracker.services.analysis import AnalysisService
from calorie_tracker.services.meals import MealLogService
from calorie_tracker.services.profiles import ProfileService
from calorie_tracker.services.stats import StatsService
from calorie_tracker.services.suggestions import SuggestionService
from calorie_tracker.services.theme import ThemeService

_logger = logging.getLogger(__name__)


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    profile_service: ProfileService
    meal_log_service: MealLogService
    stats_service: StatsService
    analysis_service: AnalysisService
    suggestion_service: SuggestionService
    theme_service: ThemeService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    state_repository = StateRepository(_build_store(resolved_settings))
    openai_client = OpenAIStructuredClient.create(
        resolved_settings.openai_api_key,
        timeout_seconds=resolved_settings.http_timeout_seconds,
    )
    analysis_service = AnalysisService(
        client=openai_client,
        model=resolved_settings.openai_analysis_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )
    suggestion_service = SuggestionService(
        client=openai_client,
        model=resolved_settings.openai_suggestion_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )
    meal_log_service = MealLogService(state_repository)
    theme_service = ThemeService(
        state_repository, prefers_dark=resolved_settings.prefers_dark
    )
    profile_service = ProfileService(
        repository=state_repository,
        meal_log_service=meal_log_service,
        suggestion_service=suggestion_service,
        theme_service=theme_service,
    )
    stats_service = StatsService(
        meal_log_service=meal_log_service,
        timezone=resolve_timezone(resolved_settings.timezone),
    )

    async def close_resources() -> None:
        await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        profile_service=profile_service,
        meal_log_service=meal_log_service,
        stats_service=stats_service,
        analysis_service=analysis_service,
        suggestion_service=suggestion_service,
        theme_service=theme_service,
        close_resources=close_resources,
    )


def load_state(container: AppContainer) -> None:
    """Restore the persisted profile and meal log into the services."""
    profile = container.profile_service.load()
    container.meal_log_service.load()
    if profile is None:
        _logger.info("No saved profile; starting in setup mode")


def _build_store(settings: Settings) -> KeyValueStore:
    if settings.uses_supabase:
        client = create_client(
            str(settings.supabase_url), str(settings.supabase_service_key)
        )
        return SupabaseKeyValueStore(client)
    return JsonFileStore(settings.state_path)
