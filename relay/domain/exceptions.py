from __future__ import annotations

from typing import Any


class RelayError(Exception):
    """Base for every failure a relay route reports to its caller.

    Carries the HTTP status and the JSON error body so a single handler can
    render all of them.
    """

    status_code: int = 500

    def __init__(self, error: str, *, details: Any = None, status_code: int | None = None):
        super().__init__(error)
        self.error = error
        self.details = details
        if status_code is not None:
            self.status_code = status_code


class InvalidInputError(RelayError):
    """Raised when a completion route receives no usable prompt or conversation."""

    status_code = 400


class MissingParameterError(RelayError):
    """Raised when an LMS route is missing a credential or identifier."""

    status_code = 400

    def __init__(self, fields: list[str]):
        super().__init__(
            f"Missing required parameter(s): {', '.join(fields)}",
            details=fields,
        )
        self.fields = fields


class NotFoundError(RelayError):
    status_code = 404


class UpstreamError(RelayError):
    """Raised when the LLM provider or the LMS fails or answers non-2xx."""

    status_code = 502


class UpstreamUnavailableError(UpstreamError):
    """Raised when an upstream is not configured (e.g. missing API key)."""


class UpstreamTimeoutError(UpstreamError):
    status_code = 504
