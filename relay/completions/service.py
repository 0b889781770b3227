from __future__ import annotations

from typing import Protocol

from relay.completions.schemas import ChatMessage
from relay.core.llm.openai_client import OpenAITimeoutError, OpenAIUpstreamError
from relay.core.metrics import record_upstream_call
from relay.core.word_filter import WordFilter
from relay.domain.exceptions import UpstreamError, UpstreamTimeoutError


class ChatCompletionClient(Protocol):
    async def create_chat_completion(self, *, messages: list[dict[str, str]]) -> str: ...


class CompletionService:
    """Relays one conversation to the model and returns filtered text."""

    def __init__(self, *, llm_client: ChatCompletionClient, word_filter: WordFilter):
        self._llm = llm_client
        self._filter = word_filter

    async def complete(self, *, messages: list[ChatMessage]) -> str:
        payload = [m.model_dump() for m in messages]
        try:
            text = await self._llm.create_chat_completion(messages=payload)
        except OpenAITimeoutError as exc:
            record_upstream_call(upstream="llm", outcome="timeout")
            raise UpstreamTimeoutError("LLM request timed out") from exc
        except OpenAIUpstreamError as exc:
            record_upstream_call(upstream="llm", outcome="error")
            details = exc.details if exc.details is not None else str(exc)
            raise UpstreamError("LLM service failed", details=details) from exc

        record_upstream_call(upstream="llm", outcome="success")
        return self._filter.clean(text)
