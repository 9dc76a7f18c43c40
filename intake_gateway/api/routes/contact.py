from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from intake_gateway.core.backends import get_admission_pipeline
from intake_gateway.core.config import settings
from intake_gateway.core.errors import MethodNotAllowedAppError, SubmissionRejected
from intake_gateway.core.request_meta import (
    cors_headers,
    get_client_ip,
    get_request_origin,
    get_user_agent,
)
from intake_gateway.schemas.contact import ContactAck
from intake_gateway.services.admission import AdmissionPipeline, IntakeRequest

router = APIRouter(tags=["Contact"])


def _ack(origin: str) -> JSONResponse:
    """The uniform ``{"ok": true}`` answer shared by admissions and masked rejections."""
    return JSONResponse(
        status_code=200,
        content=ContactAck().model_dump(),
        headers=cors_headers(origin) or None,
    )


@router.options("/contact", include_in_schema=False)
async def contact_preflight(request: Request) -> Response:
    """CORS preflight: echo the declared origin, no body."""
    return Response(status_code=204, headers=cors_headers(get_request_origin(request)) or None)


@router.post("/contact", response_model=ContactAck)
async def submit_contact(
    request: Request,
    pipeline: Annotated[AdmissionPipeline, Depends(get_admission_pipeline)],
) -> JSONResponse:
    """Accept a contact-form submission for a tenant.

    The body is read raw so that malformed JSON goes through the same
    rejection policy as every other check. With stealth mode on, every
    rejection is answered exactly like an admission.

    Returns:
        JSONResponse: ``{"ok": true}`` with CORS headers for the origin.

    Raises:
        SubmissionRejected: Only when stealth mode is off and the rejection
            is not always masked; mapped to 400/403/429/503 by the global
            handler.
    """
    origin = get_request_origin(request)
    intake = IntakeRequest(
        body=await request.body(),
        origin=origin,
        source_address=get_client_ip(request),
        user_agent=get_user_agent(request),
    )

    try:
        await pipeline.process(intake)
    except SubmissionRejected as exc:
        if exc.always_masked or settings.app.stealth_mode:
            return _ack(origin)
        raise

    return _ack(origin)


@router.api_route(
    "/contact",
    methods=["GET", "PUT", "PATCH", "DELETE"],
    include_in_schema=False,
)
async def contact_method_not_allowed(request: Request) -> None:
    raise MethodNotAllowedAppError(
        code="method_not_allowed",
        message=f"Method {request.method} is not allowed; use POST",
    )
