"""
Pydantic models for token issuance, verification and event log payloads.
"""

from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, Field, StrictInt


class IssuanceRequest(BaseModel):
    """Raw issuance input as submitted by the form or a JSON client."""

    phone_number: Optional[str] = Field(None, alias="phoneNumber")
    valid_time: Optional[Union[StrictInt, str]] = Field(
        None,
        alias="validTime",
        description="Validity window in minutes.",
    )

    model_config = {"populate_by_name": True}


class IssuanceResponse(BaseModel):
    """Confirmation returned after a QR code was issued and sent."""

    phone: str = Field(..., description="Normalized recipient phone number.")
    qr_image: str = Field(..., description="PNG QR code encoded as a data URL.")
    expires_at: datetime


class VerificationResponse(BaseModel):
    status: str
    phone: str
    message: str


class QREventClient(BaseModel):
    device_id: str


class QREventData(BaseModel):
    phone: str
    purpose: str
    requested_at: str = Field(..., description="ISO-8601 UTC request time.")
    status: str = Field(..., description="Token status when the scan arrived.")


class QREventPayload(BaseModel):
    """Body posted to the external event log for a successful scan."""

    client: QREventClient
    data: QREventData


__all__ = [
    "IssuanceRequest",
    "IssuanceResponse",
    "QREventClient",
    "QREventData",
    "QREventPayload",
    "VerificationResponse",
]
