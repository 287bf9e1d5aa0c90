"""
Error taxonomy for token issuance and verification.

Every failure kind carries its own HTTP status so callers can tell an expired
code from a used one or from an unreachable upstream.
"""

from __future__ import annotations

from http import HTTPStatus


class AccessTokenError(Exception):
    """Base class for failures surfaced to API callers."""

    status_code: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR
    default_detail = "Server error."

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class BadRequestError(AccessTokenError):
    """Required issuance input missing or malformed."""

    status_code = HTTPStatus.BAD_REQUEST
    default_detail = "Both a phone number and a validity time are required."


class TokenNotFoundError(AccessTokenError):
    status_code = HTTPStatus.NOT_FOUND
    default_detail = "Unknown QR code."


class TokenExpiredError(AccessTokenError):
    status_code = HTTPStatus.GONE
    default_detail = "This QR code has expired."


class TokenAlreadyConsumedError(AccessTokenError):
    """Token was already verified or otherwise left the pending state."""

    status_code = HTTPStatus.CONFLICT
    default_detail = "This QR code has already been used."

    def __init__(self, status: str | None = None) -> None:
        self.status = status
        detail = self.default_detail
        if status is not None:
            detail = f"{detail[:-1]} (status: {status})."
        super().__init__(detail)


class UpstreamUnavailableError(AccessTokenError):
    """Event log could not be reached before committing a verification."""

    status_code = HTTPStatus.SERVICE_UNAVAILABLE
    default_detail = "Access log is unreachable; please scan again shortly."


class SubmissionFailureError(AccessTokenError):
    """Event log rejected or dropped the verification event."""

    status_code = HTTPStatus.BAD_GATEWAY
    default_detail = "Failed to record the access event; please scan again."


class DeliveryFailureError(AccessTokenError):
    """QR rendering or SMS dispatch failed during issuance."""

    status_code = HTTPStatus.INTERNAL_SERVER_ERROR
    default_detail = "Server error."


__all__ = [
    "AccessTokenError",
    "BadRequestError",
    "DeliveryFailureError",
    "SubmissionFailureError",
    "TokenAlreadyConsumedError",
    "TokenExpiredError",
    "TokenNotFoundError",
    "UpstreamUnavailableError",
]
