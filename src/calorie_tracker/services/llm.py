"""Structured-output LLM client interface shared by the gateways."""

from typing import Protocol


class StructuredOutputClient(Protocol):
    """Interface for LLM calls constrained to a JSON schema."""

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
        """Return the parsed JSON object produced by the model."""


def text_part(text: str) -> dict[str, object]:
    """Build a text input part."""
    return {"type": "input_text", "text": text}


def image_part(data_url: str) -> dict[str, object]:
    """Build an image input part from a data URL."""
    return {"type": "input_image", "image_url": data_url}
