from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from relay.api.inputs import invalid_fields, read_request_fields
from relay.api.schemas import ERROR_RESPONSES, ErrorOut
from relay.core.lms.canvas_client import CanvasClient, LmsResponse
from relay.core.lms.deps import get_canvas_client
from relay.core.middleware.http_logging import get_request_id
from relay.core.settings import get_settings
from relay.domain.exceptions import MissingParameterError
from relay.lms.schemas import AnnouncementIn, AnnouncementOut, CourseIn, StudentsIn
from relay.lms.service import LmsRelayService

router = APIRouter(tags=["lms"])
logger = logging.getLogger("relay.lms")

_LMS_RESPONSES = {**ERROR_RESPONSES, 404: {"model": ErrorOut, "description": "Section not found."}}


async def _course_input(request: Request) -> CourseIn:
    try:
        return CourseIn.model_validate(await read_request_fields(request))
    except ValidationError as exc:
        raise MissingParameterError(invalid_fields(exc)) from None


async def _students_input(request: Request) -> StudentsIn:
    try:
        return StudentsIn.model_validate(await read_request_fields(request))
    except ValidationError as exc:
        raise MissingParameterError(invalid_fields(exc)) from None


async def _announcement_input(request: Request) -> AnnouncementIn:
    try:
        return AnnouncementIn.model_validate(await read_request_fields(request))
    except ValidationError as exc:
        raise MissingParameterError(invalid_fields(exc)) from None


def get_lms_service(client: CanvasClient = Depends(get_canvas_client)) -> LmsRelayService:
    return LmsRelayService(client=client, student_role=get_settings().lms_student_role)


def _passthrough(request: Request, resp: LmsResponse) -> JSONResponse:
    # Never log identifiers or the caller's token; route and status only.
    logger.info(
        "LMS request relayed",
        extra={
            "request_id": get_request_id(request),
            "route": request.url.path,
            "upstream": "lms",
            "upstream_status": resp.status_code,
        },
    )
    return JSONResponse(status_code=resp.status_code, content=resp.payload)


@router.post(
    "/canvasProxy",
    responses=_LMS_RESPONSES,
    summary="Fetch a course",
    description="Relays `GET /courses/{classCode}` with the caller's `apiKey`; the body is returned as-is.",
)
async def canvas_proxy(
    request: Request,
    payload: CourseIn = Depends(_course_input),
    svc: LmsRelayService = Depends(get_lms_service),
) -> JSONResponse:
    resp = await svc.get_course(api_key=payload.api_key, course_id=payload.class_code)
    return _passthrough(request, resp)


@router.api_route(
    "/sections",
    methods=["GET", "POST"],
    responses=_LMS_RESPONSES,
    summary="List course sections",
    description="Fields are read from the query string on GET and from the JSON body on POST.",
)
async def sections(
    request: Request,
    payload: CourseIn = Depends(_course_input),
    svc: LmsRelayService = Depends(get_lms_service),
) -> JSONResponse:
    resp = await svc.list_sections(api_key=payload.api_key, course_id=payload.class_code)
    return _passthrough(request, resp)


@router.api_route(
    "/students",
    methods=["GET", "POST"],
    responses=_LMS_RESPONSES,
    summary="List students of a section",
    description=(
        "Finds the course section named exactly `sectionName`, then returns its enrollments "
        "whose role is the configured student role (default `StudentEnrollment`)."
    ),
)
async def students(
    request: Request,
    payload: StudentsIn = Depends(_students_input),
    svc: LmsRelayService = Depends(get_lms_service),
) -> JSONResponse:
    resp = await svc.list_students(
        api_key=payload.api_key,
        course_id=payload.course_id,
        section_name=payload.section_name,
    )
    return _passthrough(request, resp)


@router.post(
    "/announcements",
    response_model=AnnouncementOut,
    responses=_LMS_RESPONSES,
    summary="Create a course announcement",
)
async def announcements(
    request: Request,
    payload: AnnouncementIn = Depends(_announcement_input),
    svc: LmsRelayService = Depends(get_lms_service),
) -> AnnouncementOut:
    result = await svc.create_announcement(
        api_key=payload.api_key,
        course_id=payload.course_id,
        title=payload.title,
        message=payload.message,
    )
    logger.info(
        "LMS announcement created",
        extra={"request_id": get_request_id(request), "route": request.url.path, "upstream": "lms"},
    )
    return AnnouncementOut.model_validate(result)
