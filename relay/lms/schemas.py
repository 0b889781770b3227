from __future__ import annotations

import re
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field

from relay.api.inputs import NonBlankStr

# Visible ASCII only: the token ends up in an HTTP header.
_TOKEN_PATTERN = re.compile(r"[\x21-\x7e]+")


def _identifier_to_str(value: Any) -> Any:
    # Canvas ids arrive as JSON numbers from some clients; they are opaque strings to the relay.
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


def _bearer_token(value: str) -> str:
    token = value.strip()
    if not _TOKEN_PATTERN.fullmatch(token):
        raise ValueError("must be a non-empty token of visible ASCII characters")
    return token


Identifier = Annotated[NonBlankStr, BeforeValidator(_identifier_to_str)]
BearerToken = Annotated[str, AfterValidator(_bearer_token)]


class _LmsIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    api_key: BearerToken = Field(
        alias="apiKey",
        description="Caller's Canvas access token. Used once as a bearer token, never stored.",
    )


class CourseIn(_LmsIn):
    """Input of `/canvasProxy` and `/sections`."""

    class_code: Identifier = Field(alias="classCode", description="Canvas course id.")


class StudentsIn(_LmsIn):
    course_id: Identifier = Field(alias="courseId", description="Canvas course id.")
    section_name: NonBlankStr = Field(
        alias="sectionName",
        description="Exact section name (case- and whitespace-sensitive) to list students for.",
    )


class AnnouncementIn(_LmsIn):
    course_id: Identifier = Field(alias="courseId", description="Canvas course id.")
    title: NonBlankStr
    message: NonBlankStr = Field(description="Announcement body (HTML allowed by Canvas).")


class AnnouncementOut(BaseModel):
    message: str = Field(examples=["Announcement created"])
