"""Public schema exports."""

from .tokens import (
    IssuanceRequest,
    IssuanceResponse,
    QREventClient,
    QREventData,
    QREventPayload,
    VerificationResponse,
)

__all__ = [
    "IssuanceRequest",
    "IssuanceResponse",
    "QREventClient",
    "QREventData",
    "QREventPayload",
    "VerificationResponse",
]
