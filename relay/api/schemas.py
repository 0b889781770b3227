from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ErrorOut(BaseModel):
    """Error body returned by every relay route."""

    error: str = Field(
        description="Human-readable error summary.",
        examples=["Section not found"],
    )
    details: Any = Field(
        default=None,
        description=(
            "Optional diagnostic payload: missing field names, or the upstream error body "
            "when the LLM provider or the LMS rejected the call."
        ),
    )


def error_body(error: str, details: Any = None) -> dict[str, Any]:
    body: dict[str, Any] = {"error": error}
    if details is not None:
        body["details"] = details
    return body


ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorOut, "description": "Missing or invalid input."},
    502: {"model": ErrorOut, "description": "Upstream failed or is not configured."},
    504: {"model": ErrorOut, "description": "Upstream timed out."},
}
