from __future__ import annotations

import asyncio

import httpx
import pytest

from relay.core.llm.openai_client import (
    OpenAIClient,
    OpenAIConfig,
    OpenAITimeoutError,
    OpenAIUpstreamError,
)
from tests._upstream import UpstreamStub, completion_body, sent_json

CONFIG = OpenAIConfig(
    api_key="sk-unit",
    base_url="https://llm.test/v1/",
    model="gpt-unit",
    max_tokens=64,
    timeout_seconds=5.0,
)
PATH = "/v1/chat/completions"
MESSAGES = [{"role": "user", "content": "hi"}]


def _complete(upstream: UpstreamStub) -> str:
    client = OpenAIClient(config=CONFIG, transport=upstream.transport)
    return asyncio.run(client.create_chat_completion(messages=MESSAGES))


def test_returns_first_choice_text(upstream: UpstreamStub) -> None:
    body = completion_body("first")
    body["choices"].append({"index": 1, "message": {"role": "assistant", "content": "second"}})
    upstream.on("POST", PATH, json_body=body)

    assert _complete(upstream) == "first"

    [call] = upstream.calls
    assert call.headers["Authorization"] == "Bearer sk-unit"
    assert sent_json(call) == {"model": "gpt-unit", "messages": MESSAGES, "max_tokens": 64}


def test_non_2xx_carries_status_and_provider_message(upstream: UpstreamStub) -> None:
    upstream.on(
        "POST",
        PATH,
        status_code=401,
        json_body={"error": {"message": "Incorrect API key provided", "code": "invalid_api_key"}},
    )

    with pytest.raises(OpenAIUpstreamError) as info:
        _complete(upstream)

    assert info.value.status_code == 401
    assert info.value.details == "Incorrect API key provided"


def test_non_2xx_without_error_envelope_keeps_body(upstream: UpstreamStub) -> None:
    upstream.on("POST", PATH, status_code=500, json_body={"unexpected": True})

    with pytest.raises(OpenAIUpstreamError) as info:
        _complete(upstream)

    assert info.value.details == {"unexpected": True}


@pytest.mark.parametrize(
    "body",
    [
        {"choices": []},
        {"choices": [{"message": {}}]},
        {"choices": [{"message": {"content": None}}]},
        {"result": "no choices"},
    ],
)
def test_malformed_success_payload_raises(upstream: UpstreamStub, body: dict) -> None:
    upstream.on("POST", PATH, json_body=body)

    with pytest.raises(OpenAIUpstreamError):
        _complete(upstream)


def test_non_json_success_payload_raises(upstream: UpstreamStub) -> None:
    upstream.on("POST", PATH, text="<html>proxy page</html>")

    with pytest.raises(OpenAIUpstreamError, match="malformed"):
        _complete(upstream)


def test_timeout_raises_timeout_error(upstream: UpstreamStub) -> None:
    upstream.on("POST", PATH, raises=httpx.ReadTimeout("slow"))

    with pytest.raises(OpenAITimeoutError):
        _complete(upstream)


def test_connection_error_is_not_a_timeout(upstream: UpstreamStub) -> None:
    upstream.on("POST", PATH, raises=httpx.ConnectError("refused"))

    with pytest.raises(OpenAIUpstreamError) as info:
        _complete(upstream)

    assert not isinstance(info.value, OpenAITimeoutError)
    assert info.value.status_code is None
