from __future__ import annotations

from relay.core.llm.openai_client import OpenAIClient, OpenAIConfig
from relay.core.settings import get_settings


def get_openai_client() -> OpenAIClient | None:
    """
    Dependency provider for OpenAIClient.

    Returns None when not configured so routes can answer with a 502 instead of
    failing during dependency resolution.
    """

    settings = get_settings()
    if not settings.openai_api_key:
        return None

    config = OpenAIConfig(
        api_key=settings.openai_api_key,
        base_url=settings.openai_base_url,
        model=settings.openai_model,
        max_tokens=int(settings.openai_max_tokens),
        timeout_seconds=float(settings.openai_timeout_seconds),
    )
    return OpenAIClient(config=config)
