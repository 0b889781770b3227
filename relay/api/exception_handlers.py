from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from relay.api.schemas import error_body
from relay.core.middleware.http_logging import get_request_id, safe_route_label
from relay.core.settings import get_settings
from relay.domain.exceptions import RelayError

logger = logging.getLogger("relay.errors")


def _log_extra(request: Request, status_code: int, error: str) -> dict[str, object]:
    # Never include bodies or query values: they carry LMS tokens.
    return {
        "request_id": get_request_id(request),
        "http_method": request.method,
        "request_path": safe_route_label(request=request),
        "status_code": status_code,
        "error": error,
    }


def register_exception_handlers(app: FastAPI) -> None:
    """Map every failure to exactly one JSON response."""

    @app.exception_handler(RelayError)
    async def handle_relay_error(request: Request, exc: RelayError) -> JSONResponse:
        level = logging.WARNING if exc.status_code >= 500 else logging.INFO
        logger.log(
            level,
            "Relay request failed",
            extra=_log_extra(request, exc.status_code, type(exc).__name__),
        )
        return JSONResponse(
            status_code=exc.status_code, content=error_body(exc.error, exc.details)
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Safety net for framework-level validation.

        The relay routes read raw fields and raise their own 400s, so this only fires
        for routes that declare typed FastAPI parameters.
        """
        details = [
            {"field": ".".join(str(p) for p in err.get("loc", ())), "message": err.get("msg")}
            for err in exc.errors()
        ]
        logger.info(
            "Request validation failed",
            extra=_log_extra(request, 400, "request_validation"),
        )
        return JSONResponse(status_code=400, content=error_body("Invalid input", details))

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        # The stack trace is logged by HttpLoggingMiddleware; it never goes back to the caller.
        details = None
        if get_settings().is_development:
            details = f"{type(exc).__name__}: {exc}"
        return JSONResponse(status_code=500, content=error_body("Internal server error", details))
