from __future__ import annotations

import asyncio

import httpx
import pytest

from relay.core.lms.canvas_client import (
    CanvasClient,
    CanvasConfig,
    LmsTimeoutError,
    LmsTransportError,
    LmsUpstreamError,
)
from tests._upstream import UpstreamStub, sent_json

CONFIG = CanvasConfig(base_url="https://canvas.test/api/v1/", timeout_seconds=5.0, page_size=50)


def _client(upstream: UpstreamStub) -> CanvasClient:
    return CanvasClient(config=CONFIG, transport=upstream.transport)


def test_get_course_sends_bearer_token(upstream: UpstreamStub) -> None:
    upstream.on("GET", "/api/v1/courses/42", json_body={"id": 42})

    resp = asyncio.run(_client(upstream).get_course(api_key="tok", course_id="42"))

    assert resp.status_code == 200
    assert resp.payload == {"id": 42}
    assert upstream.calls[0].headers["Authorization"] == "Bearer tok"


def test_list_calls_send_page_size(upstream: UpstreamStub) -> None:
    upstream.on("GET", "/api/v1/courses/42/sections", json_body=[])
    upstream.on("GET", "/api/v1/sections/9/enrollments", json_body=[])

    client = _client(upstream)
    asyncio.run(client.list_sections(api_key="tok", course_id="42"))
    asyncio.run(client.list_section_enrollments(api_key="tok", section_id="9"))

    assert [r.url.params["per_page"] for r in upstream.calls] == ["50", "50"]


def test_identifier_stays_one_path_segment(upstream: UpstreamStub) -> None:
    # Unstubbed, so the fake answers 404.
    with pytest.raises(LmsUpstreamError):
        asyncio.run(_client(upstream).get_course(api_key="tok", course_id="../users/self"))

    [call] = upstream.calls
    assert call.url.raw_path.startswith(b"/api/v1/courses/..%2Fusers%2Fself")


def test_sis_identifier_keeps_colon(upstream: UpstreamStub) -> None:
    upstream.on("GET", "/api/v1/courses/sis_course_id:BIO-101", json_body={"id": 1})

    resp = asyncio.run(
        _client(upstream).get_course(api_key="tok", course_id="sis_course_id:BIO-101")
    )

    assert resp.payload == {"id": 1}


def test_create_announcement_posts_discussion_topic(upstream: UpstreamStub) -> None:
    upstream.on("POST", "/api/v1/courses/42/discussion_topics", json_body={"id": 1})

    asyncio.run(
        _client(upstream).create_announcement(
            api_key="tok", course_id="42", title="Quiz", message="Tomorrow"
        )
    )

    assert sent_json(upstream.calls[0]) == {
        "title": "Quiz",
        "message": "Tomorrow",
        "is_announcement": True,
    }


def test_non_2xx_raises_with_status_and_body(upstream: UpstreamStub) -> None:
    upstream.on(
        "GET",
        "/api/v1/courses/42",
        status_code=404,
        json_body={"errors": [{"message": "The specified resource does not exist."}]},
    )

    with pytest.raises(LmsUpstreamError) as info:
        asyncio.run(_client(upstream).get_course(api_key="tok", course_id="42"))

    assert info.value.status_code == 404
    assert info.value.details == {"errors": [{"message": "The specified resource does not exist."}]}


def test_timeout_raises_timeout_error(upstream: UpstreamStub) -> None:
    upstream.on("GET", "/api/v1/courses/42", raises=httpx.ReadTimeout("slow"))

    with pytest.raises(LmsTimeoutError):
        asyncio.run(_client(upstream).get_course(api_key="tok", course_id="42"))


def test_connection_error_raises_transport_error(upstream: UpstreamStub) -> None:
    upstream.on("GET", "/api/v1/courses/42", raises=httpx.ConnectError("refused"))

    with pytest.raises(LmsTransportError) as info:
        asyncio.run(_client(upstream).get_course(api_key="tok", course_id="42"))

    assert not isinstance(info.value, LmsTimeoutError)
