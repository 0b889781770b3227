from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError

from relay.api.inputs import read_request_fields, validation_messages
from relay.api.schemas import ERROR_RESPONSES
from relay.completions.schemas import AskIn, ChatMessage, CompletionOut, PromptIn
from relay.completions.service import CompletionService
from relay.core.llm.deps import get_openai_client
from relay.core.middleware.http_logging import get_request_id
from relay.core.word_filter import WordFilter, get_word_filter
from relay.domain.exceptions import InvalidInputError, UpstreamUnavailableError

router = APIRouter(tags=["completions"])
logger = logging.getLogger("relay.completions")


async def _ask_input(request: Request) -> AskIn:
    try:
        return AskIn.model_validate(await read_request_fields(request))
    except ValidationError as exc:
        raise InvalidInputError("Invalid input", details=validation_messages(exc)) from None


async def _prompt_input(request: Request) -> PromptIn:
    try:
        return PromptIn.model_validate(await read_request_fields(request))
    except ValidationError as exc:
        raise InvalidInputError("Invalid input", details=validation_messages(exc)) from None


async def _relay_completion(
    *,
    request: Request,
    messages: list[ChatMessage],
    openai_client,
    word_filter: WordFilter,
) -> CompletionOut:
    route = request.url.path
    request_id = get_request_id(request)

    if openai_client is None:
        logger.info(
            "Completion failed (LLM not configured)",
            extra={"request_id": request_id, "route": route, "success": False},
        )
        raise UpstreamUnavailableError("LLM service unavailable")

    svc = CompletionService(llm_client=openai_client, word_filter=word_filter)
    text = await svc.complete(messages=messages)

    # Message count only; prompt and completion text are never logged.
    logger.info(
        "Completion relayed",
        extra={
            "request_id": request_id,
            "route": route,
            "message_count": len(messages),
            "success": True,
        },
    )
    return CompletionOut(success=True, message=text)


@router.post(
    "/ask",
    response_model=CompletionOut,
    responses=ERROR_RESPONSES,
    summary="Relay a conversation or prompt",
    description=(
        "Send `conversations` (list of `{role, content}`) or `prompt` (string). "
        "The first completion choice is returned after profanity filtering."
    ),
)
async def ask(
    request: Request,
    payload: AskIn = Depends(_ask_input),
    openai_client=Depends(get_openai_client),
    word_filter: WordFilter = Depends(get_word_filter),
) -> CompletionOut:
    return await _relay_completion(
        request=request,
        messages=payload.to_messages(),
        openai_client=openai_client,
        word_filter=word_filter,
    )


@router.post(
    "/checkAnswer",
    response_model=CompletionOut,
    responses=ERROR_RESPONSES,
    summary="Relay an answer-checking prompt",
    description=(
        "Relays `prompt` unchanged. No grading is performed by the relay; fields such as "
        "`expectedAnswer` are ignored."
    ),
)
async def check_answer(
    request: Request,
    payload: PromptIn = Depends(_prompt_input),
    openai_client=Depends(get_openai_client),
    word_filter: WordFilter = Depends(get_word_filter),
) -> CompletionOut:
    return await _relay_completion(
        request=request,
        messages=payload.to_messages(),
        openai_client=openai_client,
        word_filter=word_filter,
    )


@router.post(
    "/question-generator",
    response_model=CompletionOut,
    responses=ERROR_RESPONSES,
    summary="Relay a question-generation prompt",
)
async def question_generator(
    request: Request,
    payload: PromptIn = Depends(_prompt_input),
    openai_client=Depends(get_openai_client),
    word_filter: WordFilter = Depends(get_word_filter),
) -> CompletionOut:
    return await _relay_completion(
        request=request,
        messages=payload.to_messages(),
        openai_client=openai_client,
        word_filter=word_filter,
    )
