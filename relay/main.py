from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from relay.api.exception_handlers import register_exception_handlers
from relay.completions.router import router as completions_router
from relay.core.logging import setup_logging
from relay.core.metrics import PrometheusMetricsMiddleware, metrics_router
from relay.core.middleware.http_logging import HttpLoggingMiddleware
from relay.core.settings import get_settings
from relay.lms.router import router as lms_router

setup_logging()


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title="Classroom Relay API",
        description=(
            "Relays chat completions to an LLM provider and course/roster queries to Canvas.\n\n"
            "- The provider API key stays on the server; clients never see it.\n"
            "- Canvas tokens are supplied per request and are never stored or logged.\n"
            "- Model output is profanity-filtered before it is returned.\n"
            "- Errors always come back as `{\"error\": ..., \"details\"?: ...}`."
        ),
        docs_url="/swagger",
        openapi_tags=[
            {
                "name": "health",
                "description": "Plain-text liveness check.",
            },
            {
                "name": "completions",
                "description": "Chat-completion relay with profanity filtering.",
            },
            {
                "name": "lms",
                "description": "Canvas course, section, roster and announcement relay.",
            },
            {
                "name": "monitoring",
                "description": "Prometheus-compatible metrics endpoint.",
            },
        ],
    )

    app.add_middleware(PrometheusMetricsMiddleware)
    app.add_middleware(HttpLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    register_exception_handlers(app)

    @app.get(
        "/test",
        response_class=PlainTextResponse,
        tags=["health"],
        summary="Liveness check",
        description="Returns `OK` without touching any upstream.",
    )
    async def test() -> str:
        return "OK"

    app.include_router(metrics_router)
    app.include_router(completions_router)
    app.include_router(lms_router)
    return app


app = create_app()
