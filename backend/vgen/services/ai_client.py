# vgen/services/ai_client.py
"""
Google Gemini completion client.

Calls the generateContent REST endpoint with httpx:
1. generate_completion: prompt in, plain text out
2. generate_json: prompt in, validated pydantic model out
"""
import re
import json
import logging
from typing import Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from vgen.config import Settings, settings as default_settings
from vgen.core.errors import AIResponseError, AIServiceError

logger = logging.getLogger("uvicorn.error")

T = TypeVar("T", bound=BaseModel)

SYSTEM_PROMPT = (
    "You are VGen Tools, an AI assistant specialized in career development, "
    "content creation, and productivity enhancement. Provide helpful, accurate, "
    "and professional responses."
)
DEFAULT_TEMPERATURE = 0.7

_FENCE_RE = re.compile(r"^```(?:json|JSON)?\s*|\s*```$")


def extract_json_text(raw: str) -> str:
    """
    Strip Markdown code fences and surrounding prose from a model reply.

    Models often answer with ```json ... ``` or a sentence before the object;
    this returns the substring most likely to be the JSON document.
    """
    text = _FENCE_RE.sub("", raw.strip()).strip()
    if text.startswith("{") or text.startswith("["):
        return text
    start, end = text.find("{"), text.rfind("}")
    if start != -1 and end > start:
        return text[start:end + 1]
    return text


class GeminiClient:
    """Gemini generateContent client"""

    def __init__(self, settings: Settings | None = None, transport: httpx.AsyncBaseTransport | None = None):
        settings = settings or default_settings
        self.api_key = settings.gemini_api_key
        self.model = settings.gemini_model
        self.max_tokens = settings.gemini_max_tokens
        self.timeout = settings.ai_timeout_seconds
        self.api_url = f"{settings.gemini_api_base.rstrip('/')}/models/{self.model}:generateContent"
        self._transport = transport

    def is_available(self) -> bool:
        """Check if API key is configured"""
        return bool(self.api_key)

    async def generate_completion(
        self,
        prompt: str,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> str:
        """
        Send one prompt to the model.

        Parameters:
            prompt: User prompt (the VGen system prompt is prepended)
            max_tokens: Output token cap (defaults to GEMINI_MAX_TOKENS)
            temperature: Sampling temperature (defaults to 0.7)

        Returns:
            The text of the first candidate

        Raises:
            AIServiceError: Network failure, non-2xx status or empty reply
        """
        if not self.is_available():
            raise AIServiceError("GEMINI_API_KEY is not configured")

        headers = {
            "x-goog-api-key": self.api_key,
            "Content-Type": "application/json",
        }
        payload = {
            "contents": [{"parts": [{"text": f"{SYSTEM_PROMPT}\n\n{prompt}"}]}],
            "generationConfig": {
                "maxOutputTokens": max_tokens or self.max_tokens,
                "temperature": DEFAULT_TEMPERATURE if temperature is None else temperature,
            },
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.post(self.api_url, headers=headers, json=payload)
                resp.raise_for_status()
                result = resp.json()
        except httpx.HTTPStatusError as e:
            logger.error("[Gemini] HTTP %s: %s", e.response.status_code, e.response.text[:500])
            raise AIServiceError(f"Google Gemini API request failed: HTTP {e.response.status_code}") from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error("[Gemini] Request error: %s", e)
            raise AIServiceError(f"Google Gemini API request failed: {e}") from e

        try:
            parts = result["candidates"][0]["content"]["parts"]
        except (KeyError, IndexError, TypeError) as e:
            raise AIServiceError("Google Gemini API returned no candidates") from e
        return "".join(part.get("text", "") for part in parts)

    async def generate_json(self, prompt: str, schema: Type[T], **kwargs) -> T:
        """
        Generate a completion and parse it into `schema`.

        Raises:
            AIServiceError: The API call itself failed
            AIResponseError: The reply is not JSON or does not match `schema`
        """
        raw = await self.generate_completion(prompt, **kwargs)
        return parse_model_output(raw, schema)


def parse_model_output(raw: str, schema: Type[T]) -> T:
    """Parse and validate raw model text against a pydantic schema."""
    try:
        data = json.loads(extract_json_text(raw))
    except json.JSONDecodeError as e:
        raise AIResponseError(f"Model returned invalid JSON: {e}", raw) from e
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        raise AIResponseError(f"Model output does not match {schema.__name__}: {e}", raw) from e
