"""Tests for the HTTP API."""

import asyncio
from dataclasses import dataclass

from fastapi.testclient import TestClient

from calorie_tracker.adapters.state_repository import (
    MEALS_KEY,
    PROFILE_KEY,
    StateRepository,
)
from calorie_tracker.api.app import create_app
from calorie_tracker.containers import AppContainer
from calorie_tracker.services.meals import MealLogService
from tests.conftest import (
    FakeStructuredClient,
    InMemoryStore,
    MutableClock,
    make_meal,
    make_profile,
)

PROFILE_BODY = {
    "age": 30,
    "weight": 70,
    "height": 175,
    "gender": "male",
    "goal": "maintain",
    "activityLevel": "moderate",
}

MEAL_BODY = {
    "totalCalories": 520,
    "items": [
        {"name": "omelette", "calories": 320},
        {"name": "toast", "calories": 200},
    ],
}


def _client_with_profile(container: AppContainer) -> TestClient:
    client = TestClient(create_app(container))
    response = client.put("/profile", json=PROFILE_BODY)
    assert response.status_code == 200
    return client


def test_health(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    assert client.get("/health").json() == {"status": "ok"}


def test_submit_profile_returns_target_and_fetches_suggestions(
    container: AppContainer,
) -> None:
    client = TestClient(create_app(container))

    response = client.put("/profile", json=PROFILE_BODY)

    assert response.status_code == 200
    data = response.json()
    assert data["target"] == 2556
    assert data["bmr"] == 1648.75
    assert data["profile"]["activityLevel"] == "moderate"
    suggestions = client.get("/suggestions").json()
    assert len(suggestions["suggestions"]) == 3
    assert suggestions["suggestions"][0]["mealType"] == "Breakfast"


def test_invalid_profile_is_422_with_message(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.put("/profile", json={**PROFILE_BODY, "age": 0})

    assert response.status_code == 422
    assert response.json() == {"detail": "invalid age/weight/height"}
    assert client.get("/profile").status_code == 409


def test_non_finite_profile_is_422_and_not_stored(
    container: AppContainer, store: InMemoryStore
) -> None:
    client = _client_with_profile(container)
    client.post("/meals", json=MEAL_BODY)
    body = (
        '{"age": 30, "weight": 1e309, "height": 175, "gender": "male", '
        '"goal": "maintain", "activityLevel": "moderate"}'
    )

    response = client.put(
        "/profile", content=body, headers={"Content-Type": "application/json"}
    )
    huge = client.put("/profile", json={**PROFILE_BODY, "weight": 1e308})

    assert response.status_code == 422
    assert response.json() == {"detail": "invalid age/weight/height"}
    assert huge.status_code == 422
    assert store.data[PROFILE_KEY]["weight"] == 70
    assert len(client.get("/meals").json()["meals"]) == 1


def test_startup_skips_unusable_saved_profile(
    container: AppContainer, store: InMemoryStore
) -> None:
    store.data[PROFILE_KEY] = make_profile(weight=float("inf")).to_payload()

    with TestClient(create_app(container)) as client:
        assert client.get("/health").status_code == 200
        assert client.get("/profile").status_code == 409


def test_profile_endpoints_need_profile(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    assert client.get("/dashboard").status_code == 409
    assert client.get("/stats/today").status_code == 409
    assert client.post("/meals", json=MEAL_BODY).status_code == 409
    assert client.post("/suggestions/refresh").status_code == 409


def test_log_list_and_remove_meal(container: AppContainer) -> None:
    client = _client_with_profile(container)

    created = client.post("/meals", json=MEAL_BODY)
    assert created.status_code == 201
    meal_id = created.json()["id"]

    meals = client.get("/meals").json()["meals"]
    assert [meal["id"] for meal in meals] == [meal_id]
    assert meals[0]["totalCalories"] == 520

    assert client.delete(f"/meals/{meal_id}").status_code == 204
    assert client.delete(f"/meals/{meal_id}").status_code == 204
    assert client.get("/meals").json()["meals"] == []


def test_stats_today_and_week(
    container: AppContainer, clock: MutableClock
) -> None:
    client = _client_with_profile(container)
    clock.advance(days=-1)
    container.meal_log_service.add(make_meal(500))
    clock.advance(days=1)
    client.post("/meals", json=MEAL_BODY)

    today = client.get("/stats/today").json()
    week = client.get("/stats/week").json()["days"]

    assert today["consumed"] == 520
    assert today["remaining"] == 2556 - 520
    assert len(today["meals"]) == 1
    assert len(week) == 7
    assert [day["calories"] for day in week[-2:]] == [500, 520]
    assert week[-1]["name"] == "Mon"


def test_new_profile_clears_meals(container: AppContainer) -> None:
    client = _client_with_profile(container)
    client.post("/meals", json=MEAL_BODY)

    client.put("/profile", json={**PROFILE_BODY, "goal": "lose"})

    assert client.get("/meals").json()["meals"] == []
    assert client.get("/profile").json()["target"] == 2056


def test_reset_returns_to_setup(
    container: AppContainer, store: InMemoryStore
) -> None:
    client = _client_with_profile(container)
    client.post("/meals", json=MEAL_BODY)
    client.put("/theme", json={"theme": "dark"})

    response = client.delete("/profile")

    assert response.status_code == 204
    assert client.get("/profile").status_code == 409
    assert client.get("/suggestions").json()["suggestions"] == []
    assert client.get("/theme").json() == {"theme": "light"}
    assert store.data == {}


def test_analyze_text_and_image(
    container: AppContainer, llm_client: FakeStructuredClient
) -> None:
    client = TestClient(create_app(container))

    text = client.post("/meals/analyze", json={"description": "chicken and rice"})
    image = client.post(
        "/meals/analyze/image",
        content=b"\x89PNG\r\n\x1a\npixels",
        headers={"Content-Type": "image/png"},
    )

    assert text.status_code == 200
    assert text.json()["totalCalories"] == 650
    assert image.status_code == 200
    assert llm_client.calls[-1]["content"][1]["image_url"].startswith(
        "data:image/png;base64,"
    )


def test_analysis_errors(
    container: AppContainer, llm_client: FakeStructuredClient
) -> None:
    client = TestClient(create_app(container))

    blank = client.post("/meals/analyze", json={"description": ""})
    llm_client.error = RuntimeError("boom")
    failed = client.post("/meals/analyze", json={"description": "pizza"})

    assert blank.status_code == 422
    assert failed.status_code == 502
    assert failed.json() == {
        "detail": "Failed to analyze meal description. Please try again."
    }


def test_refresh_failure_reports_error(
    container: AppContainer, llm_client: FakeStructuredClient
) -> None:
    client = _client_with_profile(container)
    llm_client.error = RuntimeError("boom")

    response = client.post("/suggestions/refresh")

    assert response.status_code == 200
    assert response.json()["suggestions"] == []
    assert response.json()["suggestionsError"] is not None


def test_theme_toggle(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    assert client.get("/theme").json() == {"theme": "light"}
    assert client.post("/theme/toggle").json() == {"theme": "dark"}
    assert client.get("/theme").json() == {"theme": "dark"}


def test_dashboard(container: AppContainer) -> None:
    client = _client_with_profile(container)
    client.post("/meals", json=MEAL_BODY)

    data = client.get("/dashboard").json()

    assert data["profile"]["target"] == 2556
    assert data["today"]["consumed"] == 520
    assert len(data["todayMeals"]) == 1
    assert len(data["week"]) == 7
    assert len(data["suggestions"]) == 3
    assert data["theme"] == "light"


def test_startup_restores_saved_state(
    container: AppContainer, store: InMemoryStore, llm_client: FakeStructuredClient
) -> None:
    store.data[PROFILE_KEY] = make_profile().to_payload()
    MealLogService(StateRepository(store)).add(make_meal(300))
    assert MEALS_KEY in store.data

    with TestClient(create_app(container)) as client:
        profile = client.get("/profile").json()
        meals = client.get("/meals").json()["meals"]
        suggestions = client.get("/suggestions").json()["suggestions"]

    assert profile["target"] == 2556
    assert [meal["totalCalories"] for meal in meals] == [300]
    assert len(suggestions) == 3
    assert llm_client.calls[0]["schema_name"] == "meal_suggestions"


@dataclass
class StalledStructuredClient(FakeStructuredClient):
    """Client whose requests never complete."""

    async def generate(  # type: ignore[override]
        self, **kwargs: object
    ) -> dict[str, object]:
        await asyncio.Event().wait()
        raise AssertionError("unreachable")


def test_startup_does_not_wait_for_suggestions(
    container: AppContainer, store: InMemoryStore
) -> None:
    stalled = StalledStructuredClient()
    container.suggestion_service.client = stalled
    store.data[PROFILE_KEY] = make_profile().to_payload()

    with TestClient(create_app(container)) as client:
        assert client.get("/profile").json()["target"] == 2556
        assert client.get("/suggestions").json()["suggestions"] == []
