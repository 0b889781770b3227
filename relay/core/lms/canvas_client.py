from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

import httpx


class LmsError(Exception):
    """Base error for Canvas client failures."""


class LmsUpstreamError(LmsError):
    """Raised when Canvas answers with a non-2xx status.

    `details` is the upstream body: parsed JSON when possible, raw text otherwise.
    """

    def __init__(self, message: str, *, status_code: int, details: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class LmsTransportError(LmsError):
    """Raised when Canvas could not be reached."""


class LmsTimeoutError(LmsTransportError):
    """Raised when Canvas does not answer within the configured timeout."""


@dataclass(frozen=True)
class CanvasConfig:
    base_url: str
    timeout_seconds: float
    page_size: int


@dataclass(frozen=True)
class LmsResponse:
    status_code: int
    payload: Any


def _segment(value: str) -> str:
    # Identifiers are opaque; encode them so they stay a single path segment.
    return quote(value, safe=":")


def _body(resp: httpx.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        return resp.text


class CanvasClient:
    """
    Thin Canvas REST client.

    The bearer token belongs to the caller and is passed per call; the client
    itself only knows where Canvas lives. Nothing here is logged.
    """

    def __init__(self, *, config: CanvasConfig, transport: httpx.AsyncBaseTransport | None = None):
        self._config = config
        self._transport = transport

    async def _request(
        self,
        method: str,
        path: str,
        *,
        api_key: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> LmsResponse:
        url = f"{self._config.base_url.rstrip('/')}{path}"
        headers = {"Authorization": f"Bearer {api_key}"}

        try:
            async with httpx.AsyncClient(
                timeout=self._config.timeout_seconds, transport=self._transport
            ) as client:
                resp = await client.request(method, url, headers=headers, params=params, json=json)
        except httpx.TimeoutException as exc:
            raise LmsTimeoutError("LMS request timed out") from exc
        except httpx.HTTPError as exc:
            raise LmsTransportError("LMS request failed") from exc

        if not resp.is_success:
            raise LmsUpstreamError(
                "LMS request failed", status_code=resp.status_code, details=_body(resp)
            )

        return LmsResponse(status_code=resp.status_code, payload=_body(resp))

    def _list_params(self) -> dict[str, Any]:
        return {"per_page": self._config.page_size}

    async def get_course(self, *, api_key: str, course_id: str) -> LmsResponse:
        return await self._request("GET", f"/courses/{_segment(course_id)}", api_key=api_key)

    async def list_sections(self, *, api_key: str, course_id: str) -> LmsResponse:
        return await self._request(
            "GET",
            f"/courses/{_segment(course_id)}/sections",
            api_key=api_key,
            params=self._list_params(),
        )

    async def list_section_enrollments(self, *, api_key: str, section_id: str) -> LmsResponse:
        return await self._request(
            "GET",
            f"/sections/{_segment(section_id)}/enrollments",
            api_key=api_key,
            params=self._list_params(),
        )

    async def create_announcement(
        self, *, api_key: str, course_id: str, title: str, message: str
    ) -> LmsResponse:
        return await self._request(
            "POST",
            f"/courses/{_segment(course_id)}/discussion_topics",
            api_key=api_key,
            json={"title": title, "message": message, "is_announcement": True},
        )
