"""Meal analysis gateway: description or photo to a structured meal."""

import base64
import logging
from dataclasses import dataclass

from calorie_tracker.domain.meals import Meal
from calorie_tracker.errors import MealAnalysisError, MealInputError
from calorie_tracker.services.llm import StructuredOutputClient, image_part, text_part

TEXT_FAILURE_MESSAGE = "Failed to analyze meal description. Please try again."
IMAGE_FAILURE_MESSAGE = "Failed to analyze meal image. Please try again."

MEAL_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "totalCalories": {"type": "integer", "minimum": 0},
        "items": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "calories": {"type": "integer", "minimum": 0},
                },
                "required": ["name", "calories"],
                "additionalProperties": False,
            },
        },
    },
    "required": ["totalCalories", "items"],
    "additionalProperties": False,
}

_logger = logging.getLogger(__name__)


@dataclass
class AnalysisService:
    """Service that prompts the analysis model and validates its meal."""

    client: StructuredOutputClient
    model: str
    reasoning_effort: str | None
    store: bool

    async def analyze(
        self,
        *,
        description: str | None = None,
        image_bytes: bytes | None = None,
        mime_type: str | None = None,
    ) -> Meal:
        """Analyze exactly one of a description or an image."""
        has_text = bool(description and description.strip())
        has_image = bool(image_bytes)
        if has_text and has_image:
            raise MealInputError(
                "Provide either a meal description or an image, not both."
            )
        if has_image:
            return await self.analyze_image(image_bytes or b"", mime_type)
        return await self.analyze_text(description or "")

    async def analyze_text(self, description: str) -> Meal:
        """Estimate calories for a free-text meal description."""
        cleaned = description.strip()
        if not cleaned:
            raise MealInputError
        prompt = (
            f"Analyze this meal description: '{cleaned}'. "
            "Estimate the total calories of the meal and list each food item "
            "with its own calorie estimate."
        )
        return await self._run([text_part(prompt)], TEXT_FAILURE_MESSAGE)

    async def analyze_image(
        self, image_bytes: bytes, mime_type: str | None = None
    ) -> Meal:
        """Estimate calories for the food shown in a photo."""
        if not image_bytes:
            raise MealInputError
        prompt = (
            "Identify the food items in this image. For each item give a "
            "short name and an estimated calorie count, plus the meal total."
        )
        data_url = to_data_url(image_bytes, mime_type)
        return await self._run(
            [text_part(prompt), image_part(data_url)], IMAGE_FAILURE_MESSAGE
        )

    async def _run(
        self, content: list[dict[str, object]], failure_message: str
    ) -> Meal:
        try:
            raw = await self.client.generate(
                model=self.model,
                reasoning_effort=self.reasoning_effort,
                store=self.store,
                content=content,
                schema=MEAL_SCHEMA,
                schema_name="meal_analysis",
            )
            meal = Meal.model_validate(raw)
        except Exception as exc:
            _logger.exception("Meal analysis failed")
            raise MealAnalysisError(failure_message) from exc
        if meal.total_calories != meal.items_calories():
            _logger.info(
                "Meal total %s differs from item sum %s; keeping reported total",
                meal.total_calories,
                meal.items_calories(),
            )
        return meal


def to_data_url(image_bytes: bytes, mime_type: str | None = None) -> str:
    """Convert bytes to a base64 data URL for image input."""
    resolved = mime_type if mime_type and mime_type.startswith("image/") else None
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{resolved or detect_mime_type(image_bytes)};base64,{encoded}"


def detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    if image_bytes[:6] in {b"GIF87a", b"GIF89a"}:
        return "image/gif"
    return "image/jpeg"
