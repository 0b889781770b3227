from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from relay.api.inputs import NonBlankStr

ChatRole = Literal["user", "assistant", "system"]


class ChatMessage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    role: ChatRole
    content: NonBlankStr


class AskIn(BaseModel):
    """Body of `/ask`: a full conversation, or a single prompt."""

    model_config = ConfigDict(extra="ignore")

    conversations: list[ChatMessage] | None = Field(
        default=None,
        min_length=1,
        description="Ordered chat history. Takes precedence over `prompt` when both are sent.",
    )
    prompt: NonBlankStr | None = Field(
        default=None,
        description="Single user prompt, sent as one `user` message.",
    )

    @model_validator(mode="after")
    def _require_conversation_or_prompt(self) -> AskIn:
        if self.conversations is None and self.prompt is None:
            raise ValueError("either 'conversations' or 'prompt' is required")
        return self

    def to_messages(self) -> list[ChatMessage]:
        if self.conversations is not None:
            return list(self.conversations)
        return [ChatMessage(role="user", content=str(self.prompt))]


class PromptIn(BaseModel):
    """Body of `/checkAnswer` and `/question-generator`.

    Other fields (e.g. `expectedAnswer`) are accepted and ignored; the prompt is
    relayed as-is.
    """

    model_config = ConfigDict(extra="ignore")

    prompt: NonBlankStr = Field(description="Prompt relayed to the model as one `user` message.")

    def to_messages(self) -> list[ChatMessage]:
        return [ChatMessage(role="user", content=self.prompt)]


class CompletionOut(BaseModel):
    success: bool = Field(default=True, examples=[True])
    message: str = Field(
        description="Text of the first completion choice, profanity-filtered.",
        examples=["The answer is 4."],
    )
