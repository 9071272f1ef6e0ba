"""FastAPI application factory."""

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator

from fastapi import BackgroundTasks, FastAPI, Request, Response, status
from fastapi.responses import JSONResponse

from calorie_tracker.api.models import ProfileRequest, TextAnalysisRequest, ThemeRequest
from calorie_tracker.app_logging import configure_logging
from calorie_tracker.containers import AppContainer, load_state
from calorie_tracker.domain.meals import Meal
from calorie_tracker.domain.profile import EnergyBreakdown, Profile
from calorie_tracker.domain.stats import DailyCalories, TodaySummary
from calorie_tracker.domain.suggestions import MealSuggestion
from calorie_tracker.errors import (
    CalorieTrackerError,
    MealAnalysisError,
    MealInputError,
    ProfileMissingError,
    ProfileValidationError,
)

_ERROR_STATUS: dict[type[CalorieTrackerError], int] = {
    ProfileValidationError: 422,
    MealInputError: 422,
    ProfileMissingError: status.HTTP_409_CONFLICT,
    MealAnalysisError: status.HTTP_502_BAD_GATEWAY,
}


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @contextlib.asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        state_container: AppContainer = app.state.container
        load_state(state_container)
        profile = state_container.profile_service.current()
        target = state_container.profile_service.target()
        refresh_task: asyncio.Task[list[MealSuggestion]] | None = None
        if profile is not None and target is not None:
            refresh_task = asyncio.create_task(
                state_container.suggestion_service.refresh(profile, target)
            )
        yield
        if refresh_task is not None and not refresh_task.done():
            refresh_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await refresh_task
        await state_container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(CalorieTrackerError)
    async def tracker_error_handler(
        request: Request, exc: CalorieTrackerError
    ) -> JSONResponse:
        status_code = _ERROR_STATUS.get(type(exc), status.HTTP_400_BAD_REQUEST)
        if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.warning("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=status_code, content={"detail": exc.message})

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/profile")
    async def get_profile(request: Request) -> dict[str, object]:
        """Return the live profile and its energy breakdown."""
        state_container: AppContainer = request.app.state.container
        profile, energy = state_container.profile_service.require()
        return _profile_payload(profile, energy)

    @app.put("/profile")
    async def submit_profile(
        body: ProfileRequest, request: Request, background_tasks: BackgroundTasks
    ) -> dict[str, object]:
        """Submit a new profile; this clears the meal log."""
        state_container: AppContainer = request.app.state.container
        profile = body.to_profile()
        energy = state_container.profile_service.submit(profile)
        background_tasks.add_task(
            state_container.suggestion_service.refresh, profile, energy.target
        )
        return _profile_payload(profile, energy)

    @app.delete("/profile", status_code=status.HTTP_204_NO_CONTENT)
    async def reset_profile(request: Request) -> Response:
        """Clear profile, meals, suggestions and theme."""
        state_container: AppContainer = request.app.state.container
        state_container.profile_service.reset()
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @app.get("/meals")
    async def list_meals(request: Request) -> dict[str, object]:
        """Return every logged meal in insertion order."""
        state_container: AppContainer = request.app.state.container
        meals = state_container.meal_log_service.all()
        return {"meals": [meal.to_payload() for meal in meals]}

    @app.post("/meals", status_code=status.HTTP_201_CREATED)
    async def log_meal(meal: Meal, request: Request) -> dict[str, object]:
        """Log an accepted meal at the current instant."""
        state_container: AppContainer = request.app.state.container
        state_container.profile_service.require()
        logged = state_container.meal_log_service.add(meal)
        return logged.to_payload()

    @app.delete("/meals/{meal_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def remove_meal(meal_id: int, request: Request) -> Response:
        """Remove a logged meal; unknown ids are ignored."""
        state_container: AppContainer = request.app.state.container
        state_container.meal_log_service.remove(meal_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @app.post("/meals/analyze")
    async def analyze_text(
        body: TextAnalysisRequest, request: Request
    ) -> dict[str, object]:
        """Analyze a free-text meal description."""
        state_container: AppContainer = request.app.state.container
        meal = await state_container.analysis_service.analyze_text(body.description)
        return meal.model_dump(by_alias=True)

    @app.post("/meals/analyze/image")
    async def analyze_image(request: Request) -> dict[str, object]:
        """Analyze a raw image body; Content-Type carries the MIME type."""
        state_container: AppContainer = request.app.state.container
        image_bytes = await request.body()
        mime_type = request.headers.get("content-type")
        meal = await state_container.analysis_service.analyze_image(
            image_bytes, mime_type
        )
        return meal.model_dump(by_alias=True)

    @app.get("/stats/today")
    async def stats_today(request: Request) -> dict[str, object]:
        """Return today's consumption against the target."""
        state_container: AppContainer = request.app.state.container
        _, energy = state_container.profile_service.require()
        summary = state_container.stats_service.today_summary(energy.target)
        meals = state_container.stats_service.today_meals()
        return {
            **_summary_payload(summary),
            "meals": [meal.to_payload() for meal in meals],
        }

    @app.get("/stats/week")
    async def stats_week(request: Request) -> dict[str, object]:
        """Return the seven-day consumption trend."""
        state_container: AppContainer = request.app.state.container
        trend = state_container.stats_service.weekly_trend()
        return {"days": [_trend_payload(entry) for entry in trend]}

    @app.get("/suggestions")
    async def get_suggestions(request: Request) -> dict[str, object]:
        """Return the cached meal-plan suggestions."""
        state_container: AppContainer = request.app.state.container
        return _suggestions_payload(state_container)

    @app.post("/suggestions/refresh")
    async def refresh_suggestions(request: Request) -> dict[str, object]:
        """Request a fresh meal plan for the live profile."""
        state_container: AppContainer = request.app.state.container
        profile, energy = state_container.profile_service.require()
        await state_container.suggestion_service.refresh(profile, energy.target)
        return _suggestions_payload(state_container)

    @app.get("/theme")
    async def get_theme(request: Request) -> dict[str, str]:
        """Return the active theme."""
        state_container: AppContainer = request.app.state.container
        return {"theme": state_container.theme_service.current().value}

    @app.put("/theme")
    async def set_theme(body: ThemeRequest, request: Request) -> dict[str, str]:
        """Store the theme preference."""
        state_container: AppContainer = request.app.state.container
        return {"theme": state_container.theme_service.set(body.theme).value}

    @app.post("/theme/toggle")
    async def toggle_theme(request: Request) -> dict[str, str]:
        """Switch between light and dark."""
        state_container: AppContainer = request.app.state.container
        return {"theme": state_container.theme_service.toggle().value}

    @app.get("/dashboard")
    async def dashboard(request: Request) -> dict[str, object]:
        """Return everything the main screen shows in one payload."""
        state_container: AppContainer = request.app.state.container
        profile, energy = state_container.profile_service.require()
        stats = state_container.stats_service
        return {
            "profile": _profile_payload(profile, energy),
            "today": _summary_payload(stats.today_summary(energy.target)),
            "todayMeals": [meal.to_payload() for meal in stats.today_meals()],
            "week": [_trend_payload(entry) for entry in stats.weekly_trend()],
            **_suggestions_payload(state_container),
            "theme": state_container.theme_service.current().value,
        }

    return app


def _profile_payload(profile: Profile, energy: EnergyBreakdown) -> dict[str, object]:
    return {
        "profile": profile.to_payload(),
        "bmr": round(energy.bmr, 2),
        "tdee": round(energy.tdee, 2),
        "target": energy.target,
    }


def _summary_payload(summary: TodaySummary) -> dict[str, object]:
    return {
        "date": summary.day.isoformat(),
        "consumed": summary.consumed,
        "target": summary.target,
        "remaining": summary.remaining,
        "percentage": round(summary.percentage, 1),
    }


def _trend_payload(entry: DailyCalories) -> dict[str, object]:
    return {
        "date": entry.day.isoformat(),
        "name": entry.day_label,
        "calories": entry.calories,
    }


def _suggestion_payload(suggestion: MealSuggestion) -> dict[str, object]:
    return suggestion.model_dump(by_alias=True)


def _suggestions_payload(container: AppContainer) -> dict[str, object]:
    service = container.suggestion_service
    return {
        "suggestions": [_suggestion_payload(item) for item in service.current()],
        "suggestionsError": service.last_error,
    }

