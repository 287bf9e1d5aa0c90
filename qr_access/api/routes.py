"""
FastAPI routes for issuing and verifying QR access tokens.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from pathlib import Path
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from pydantic import ValidationError

from qr_access.core.errors import AccessTokenError, BadRequestError
from qr_access.dependencies import get_issuance_service, get_verification_service
from qr_access.schemas import IssuanceRequest, IssuanceResponse, VerificationResponse
from qr_access.services.issuance import MAX_VALID_MINUTES

router = APIRouter()
logger = logging.getLogger(__name__)
templates = Jinja2Templates(directory=Path(__file__).resolve().parents[1] / "templates")


def _wants_html(request: Request) -> bool:
    return "text/html" in request.headers.get("accept", "").lower()


def _to_http_exception(exc: AccessTokenError) -> HTTPException:
    return HTTPException(status_code=exc.status_code, detail=exc.detail)


def _error_response(request: Request, exc: AccessTokenError):
    """Render the failure for browsers; API clients get the JSON error."""
    if _wants_html(request):
        return templates.TemplateResponse(
            request,
            "error.html",
            {"message": exc.detail},
            status_code=exc.status_code,
        )
    raise _to_http_exception(exc) from exc


async def _read_issuance_request(request: Request) -> IssuanceRequest:
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except ValueError as exc:
            raise BadRequestError("Request body is not valid JSON.") from exc
        if not isinstance(body, dict):
            raise BadRequestError()
    else:
        body = dict(await request.form())
    try:
        return IssuanceRequest(
            phoneNumber=body.get("phoneNumber"),
            validTime=body.get("validTime"),
        )
    except ValidationError as exc:
        raise BadRequestError("Phone number or validity time is malformed.") from exc


@router.get("/health", status_code=HTTPStatus.OK)
async def healthcheck() -> dict:
    """Simple health endpoint for monitoring."""
    return {"status": "ok"}


@router.get("/", response_class=HTMLResponse)
async def index(request: Request):
    """Serve the issuance test form."""
    return templates.TemplateResponse(
        request, "index.html", {"max_minutes": MAX_VALID_MINUTES}
    )


@router.post("/generate-qr", response_model=IssuanceResponse)
async def generate_qr(
    request: Request,
    service: Annotated[Any, Depends(get_issuance_service)],
):
    """Issue a token, text its verification link and return the QR image."""
    try:
        payload = await _read_issuance_request(request)
        issued = await service.issue(payload)
    except AccessTokenError as exc:
        return _error_response(request, exc)

    response = IssuanceResponse(
        phone=issued.record.phone_number,
        qr_image=issued.qr_image,
        expires_at=issued.record.expires_at,
    )
    if _wants_html(request):
        return templates.TemplateResponse(
            request,
            "result.html",
            {
                "phone": response.phone,
                "qr_image": response.qr_image,
                "expires_at": response.expires_at,
            },
        )
    return response


@router.get("/verify-qr", response_model=VerificationResponse)
async def verify_qr(
    request: Request,
    service: Annotated[Any, Depends(get_verification_service)],
    token: str | None = Query(default=None, description="Token embedded in the QR link."),
):
    """Redeem a scanned QR code."""
    if not token:
        return _error_response(request, BadRequestError("Missing verification token."))

    try:
        record = await service.verify(token)
    except AccessTokenError as exc:
        logger.info("Rejected scan (%s): %s", int(exc.status_code), exc.detail)
        return _error_response(request, exc)

    if _wants_html(request):
        return templates.TemplateResponse(
            request, "verified.html", {"phone": record.phone_number}
        )
    return VerificationResponse(
        status=record.status.value,
        phone=record.phone_number,
        message="Access granted.",
    )


__all__ = ["router"]
