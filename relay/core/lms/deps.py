from __future__ import annotations

from relay.core.lms.canvas_client import CanvasClient, CanvasConfig
from relay.core.settings import get_settings


def get_canvas_client() -> CanvasClient:
    """Dependency provider for CanvasClient (credentials come with each request)."""

    settings = get_settings()
    config = CanvasConfig(
        base_url=settings.lms_base_url,
        timeout_seconds=float(settings.lms_timeout_seconds),
        page_size=int(settings.lms_page_size),
    )
    return CanvasClient(config=config)
