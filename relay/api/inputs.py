"""Input normalization shared by relay routes.

Routes that accept both GET and POST read the same fields from either the
query string or the JSON body. Both are reduced to a plain mapping here, and
each route validates that mapping into its own typed model.
"""

from __future__ import annotations

import json
from typing import Annotated, Any

from fastapi import Request
from pydantic import AfterValidator, ValidationError

from relay.domain.exceptions import InvalidInputError

_BODYLESS_METHODS = frozenset({"GET", "HEAD", "DELETE"})


def _require_text(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be blank")
    return value


# Rejects blank input but keeps the value exactly as sent.
NonBlankStr = Annotated[str, AfterValidator(_require_text)]


async def read_request_fields(request: Request) -> dict[str, Any]:
    if request.method in _BODYLESS_METHODS:
        return dict(request.query_params)

    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        data = json.loads(raw)
    except ValueError:
        raise InvalidInputError("Request body must be valid JSON") from None
    if not isinstance(data, dict):
        raise InvalidInputError("Request body must be a JSON object")
    return data


def invalid_fields(exc: ValidationError) -> list[str]:
    """Top-level field names (as sent by the client) that failed validation."""

    fields: list[str] = []
    for err in exc.errors():
        loc = err.get("loc") or ()
        name = str(loc[0]) if loc else "body"
        if name not in fields:
            fields.append(name)
    return fields


def validation_messages(exc: ValidationError) -> list[dict[str, str]]:
    return [
        {
            "field": ".".join(str(p) for p in err.get("loc", ())) or "body",
            "message": err.get("msg", ""),
        }
        for err in exc.errors()
    ]
