from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx


class OpenAIError(Exception):
    """Base error for OpenAI client failures."""


class OpenAIUnavailableError(OpenAIError):
    """Raised when OpenAI is not configured (e.g., missing API key)."""


class OpenAIUpstreamError(OpenAIError):
    """Raised when OpenAI API fails or returns an unexpected response."""

    def __init__(self, message: str, *, status_code: int | None = None, details: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class OpenAITimeoutError(OpenAIUpstreamError):
    """Raised when OpenAI does not answer within the configured timeout."""


@dataclass(frozen=True)
class OpenAIConfig:
    api_key: str
    base_url: str
    model: str
    max_tokens: int
    timeout_seconds: float


def _error_details(resp: httpx.Response) -> Any:
    # OpenAI wraps failures as {"error": {"message": ...}}; fall back to raw text.
    try:
        body = resp.json()
    except ValueError:
        return resp.text
    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        message = body["error"].get("message")
        if message:
            return message
    return body


class OpenAIClient:
    """
    Minimal Chat Completions client.

    - No logging in this module (prompts/outputs are user content).
    - One request per call, no retries.
    - Returns the text of the first choice only.
    """

    def __init__(self, *, config: OpenAIConfig, transport: httpx.AsyncBaseTransport | None = None):
        self._config = config
        self._transport = transport

    async def create_chat_completion(self, *, messages: list[dict[str, str]]) -> str:
        url = f"{self._config.base_url.rstrip('/')}/chat/completions"
        headers = {
            "Authorization": f"Bearer {self._config.api_key}",
            "Content-Type": "application/json",
        }
        payload: dict[str, Any] = {
            "model": self._config.model,
            "messages": messages,
            "max_tokens": self._config.max_tokens,
        }

        try:
            async with httpx.AsyncClient(
                timeout=self._config.timeout_seconds, transport=self._transport
            ) as client:
                resp = await client.post(url, headers=headers, json=payload)
        except httpx.TimeoutException as exc:
            raise OpenAITimeoutError("LLM request timed out") from exc
        except httpx.HTTPError as exc:
            raise OpenAIUpstreamError("LLM request failed", details=str(exc)) from exc

        if not resp.is_success:
            raise OpenAIUpstreamError(
                "LLM service returned an error",
                status_code=resp.status_code,
                details=_error_details(resp),
            )

        try:
            data = resp.json()
            content = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise OpenAIUpstreamError(
                "LLM response was malformed", status_code=resp.status_code
            ) from exc

        if not isinstance(content, str):
            raise OpenAIUpstreamError(
                "LLM response had no text content", status_code=resp.status_code
            )

        return content
