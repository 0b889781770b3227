from __future__ import annotations

from collections.abc import Awaitable
from typing import Any

from relay.core.lms.canvas_client import (
    CanvasClient,
    LmsResponse,
    LmsTimeoutError,
    LmsTransportError,
    LmsUpstreamError,
)
from relay.core.metrics import record_upstream_call
from relay.domain.exceptions import NotFoundError, UpstreamError, UpstreamTimeoutError

ANNOUNCEMENT_CREATED = "Announcement created"


def find_section(sections: list[Any], *, name: str) -> dict[str, Any] | None:
    """First section whose name equals `name` exactly."""

    for section in sections:
        if isinstance(section, dict) and section.get("name") == name:
            return section
    return None


def filter_enrollments(enrollments: list[Any], *, role: str) -> list[dict[str, Any]]:
    return [e for e in enrollments if isinstance(e, dict) and e.get("role") == role]


class LmsRelayService:
    def __init__(self, *, client: CanvasClient, student_role: str):
        self._client = client
        self._student_role = student_role

    async def _call(self, call: Awaitable[LmsResponse]) -> LmsResponse:
        try:
            resp = await call
        except LmsUpstreamError as exc:
            record_upstream_call(upstream="lms", outcome="error")
            # Keep the caller-visible status: a bad token is the caller's 401, not ours.
            raise UpstreamError(
                "LMS request failed", status_code=exc.status_code, details=exc.details
            ) from exc
        except LmsTimeoutError as exc:
            record_upstream_call(upstream="lms", outcome="timeout")
            raise UpstreamTimeoutError("LMS request timed out") from exc
        except LmsTransportError as exc:
            record_upstream_call(upstream="lms", outcome="error")
            raise UpstreamError("LMS request failed", details="LMS could not be reached") from exc

        record_upstream_call(upstream="lms", outcome="success")
        return resp

    async def get_course(self, *, api_key: str, course_id: str) -> LmsResponse:
        return await self._call(self._client.get_course(api_key=api_key, course_id=course_id))

    async def list_sections(self, *, api_key: str, course_id: str) -> LmsResponse:
        return await self._call(self._client.list_sections(api_key=api_key, course_id=course_id))

    async def list_students(self, *, api_key: str, course_id: str, section_name: str) -> LmsResponse:
        sections = await self.list_sections(api_key=api_key, course_id=course_id)
        if not isinstance(sections.payload, list):
            raise UpstreamError("LMS returned an unexpected sections payload")

        section = find_section(sections.payload, name=section_name)
        if section is None or section.get("id") is None:
            raise NotFoundError("Section not found")

        enrollments = await self._call(
            self._client.list_section_enrollments(api_key=api_key, section_id=str(section["id"]))
        )
        if not isinstance(enrollments.payload, list):
            raise UpstreamError("LMS returned an unexpected enrollments payload")

        return LmsResponse(
            status_code=enrollments.status_code,
            payload=filter_enrollments(enrollments.payload, role=self._student_role),
        )

    async def create_announcement(
        self, *, api_key: str, course_id: str, title: str, message: str
    ) -> dict[str, str]:
        # The created topic is not echoed back to the caller.
        await self._call(
            self._client.create_announcement(
                api_key=api_key, course_id=course_id, title=title, message=message
            )
        )
        return {"message": ANNOUNCEMENT_CREATED}
