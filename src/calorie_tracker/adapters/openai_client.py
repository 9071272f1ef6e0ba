"""OpenAI Responses API client for structured outputs."""

import json
from dataclasses import dataclass

import httpx
from openai import AsyncOpenAI

from calorie_tracker.services.llm import StructuredOutputClient


@dataclass
class OpenAIStructuredClient(StructuredOutputClient):
    """Structured-output client backed by OpenAI Responses API."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str, timeout_seconds: float) -> "OpenAIStructuredClient":
        """Create a client whose requests time out at the transport level."""
        http_client = httpx.AsyncClient(timeout=httpx.Timeout(timeout_seconds))
        return cls(client=AsyncOpenAI(api_key=api_key, http_client=http_client))

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
        """Call OpenAI Responses API with a strict JSON schema."""
        request_payload: dict[str, object] = {
            "model": model,
            "input": [{"role": "user", "content": content}],
            "text": {
                "format": {
                    "type": "json_schema",
                    "name": schema_name,
                    "strict": True,
                    "schema": schema,
                }
            },
            "store": store,
        }
        if reasoning_effort:
            request_payload["reasoning"] = {"effort": reasoning_effort}

        response = await self.client.responses.create(**request_payload)
        output_text = response.output_text
        if not output_text:
            raise RuntimeError("OpenAI returned an empty response")
        parsed = json.loads(output_text.strip())
        if not isinstance(parsed, dict):
            raise RuntimeError("OpenAI returned a non-object response")
        return parsed

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()
