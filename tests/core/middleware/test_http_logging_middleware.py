"""Unit tests for the HTTP logging middleware.

Structured log fields are asserted via `caplog`, never message strings.
"""

from __future__ import annotations

import logging

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from relay.core.middleware.http_logging import HttpLoggingMiddleware


def _make_app() -> FastAPI:
    app = FastAPI()
    app.add_middleware(HttpLoggingMiddleware)

    @app.get("/sections")
    async def sections() -> list[dict[str, str]]:
        return [{"name": "Section A"}]

    @app.get("/courses/{course_id}")
    async def course(course_id: str) -> dict[str, str]:
        return {"id": course_id}

    @app.get("/boom")
    async def boom() -> None:
        raise RuntimeError("boom")

    return app


def _http_records(caplog: pytest.LogCaptureFixture) -> list[logging.LogRecord]:
    return [r for r in caplog.records if r.name == "relay.http"]


def test_successful_request_logs_metadata_without_query_values(
    caplog: pytest.LogCaptureFixture,
) -> None:
    caplog.set_level(logging.INFO, logger="relay.http")

    with TestClient(_make_app()) as client:
        res = client.get("/sections?apiKey=secret-token&classCode=101")

    assert res.status_code == 200
    assert res.headers["x-request-id"]

    info_records = [r for r in _http_records(caplog) if r.levelno == logging.INFO]
    assert len(info_records) == 1

    record = info_records[0]
    assert record.__dict__["request_id"] == res.headers["x-request-id"]
    assert record.__dict__["http_method"] == "GET"
    assert record.__dict__["request_path"] == "/sections"
    assert record.__dict__["status_code"] == 200
    assert record.__dict__["duration_ms"] >= 0
    assert "secret-token" not in caplog.text


def test_logs_route_template_not_identifiers(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="relay.http")

    with TestClient(_make_app()) as client:
        client.get("/courses/98765")

    [record] = _http_records(caplog)
    assert record.__dict__["request_path"] == "/courses/{course_id}"


@pytest.mark.parametrize(
    ("sent", "propagated"),
    [("req_abc-123", True), ("bad id with spaces", False), ("-leading-dash", False)],
)
def test_request_id_propagation(
    caplog: pytest.LogCaptureFixture, sent: str, propagated: bool
) -> None:
    caplog.set_level(logging.INFO, logger="relay.http")

    with TestClient(_make_app()) as client:
        res = client.get("/sections", headers={"X-Request-ID": sent})

    assert (res.headers["x-request-id"] == sent) is propagated
    assert _http_records(caplog)[0].__dict__["request_id"] == res.headers["x-request-id"]


def test_unhandled_exception_returns_500_and_logs_error_with_request_id(
    caplog: pytest.LogCaptureFixture,
) -> None:
    caplog.set_level(logging.INFO, logger="relay.http")

    with TestClient(_make_app(), raise_server_exceptions=False) as client:
        res = client.get("/boom", headers={"X-Request-ID": "req_err_001"})

    assert res.status_code == 500

    error_records = [r for r in _http_records(caplog) if r.levelno == logging.ERROR]
    assert len(error_records) == 1

    record = error_records[0]
    assert record.__dict__["request_id"] == "req_err_001"
    assert record.__dict__["request_path"] == "/boom"
    assert record.__dict__["status_code"] == 500
    assert record.exc_info
