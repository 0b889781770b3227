from __future__ import annotations

import pytest


@pytest.fixture(autouse=True)
def _test_settings(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("OPENAI_BASE_URL", "https://llm.test/v1")
    monkeypatch.setenv("OPENAI_MODEL", "gpt-test")
    monkeypatch.setenv("LMS_BASE_URL", "https://canvas.test/api/v1")
    monkeypatch.setenv("PROFANITY_EXTRA_WORDS", '["fiddlesticks"]')
    monkeypatch.delenv("APP_ENV", raising=False)

    # Settings and the word filter are cached per process; rebuild them from this test's env.
    from relay.core.settings import get_settings
    from relay.core.word_filter import get_word_filter

    get_settings.cache_clear()
    get_word_filter.cache_clear()
    yield
    get_settings.cache_clear()
    get_word_filter.cache_clear()


@pytest.fixture
def upstream():
    from tests._upstream import UpstreamStub

    return UpstreamStub()


@pytest.fixture
def client(upstream):
    from fastapi.testclient import TestClient

    from relay.core.llm.deps import get_openai_client
    from relay.core.lms.deps import get_canvas_client
    from relay.main import create_app

    app = create_app()
    app.dependency_overrides[get_openai_client] = upstream.openai_client
    app.dependency_overrides[get_canvas_client] = upstream.canvas_client
    with TestClient(app) as c:
        yield c
