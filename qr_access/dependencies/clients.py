"""
Factory functions to provide shared clients and services as FastAPI dependencies.
"""

from functools import lru_cache

from qr_access.clients import EventLogClient, QRCodeRenderer, SolapiMessagingClient
from qr_access.core.config import get_settings
from qr_access.services import (
    TokenIssuanceService,
    TokenStore,
    TokenVerificationService,
)


@lru_cache()
def _settings():
    """Internal helper to cache settings for client factories."""
    return get_settings()


@lru_cache()
def get_token_store() -> TokenStore:
    """Provide the process-wide token store."""
    return TokenStore()


@lru_cache()
def get_event_log_client() -> EventLogClient:
    settings = _settings()
    return EventLogClient(settings.event_log)


@lru_cache()
def get_messaging_client() -> SolapiMessagingClient:
    """Provide the SOLAPI messaging client."""
    settings = _settings()
    return SolapiMessagingClient(settings.messaging)


@lru_cache()
def get_qr_renderer() -> QRCodeRenderer:
    return QRCodeRenderer()


def get_issuance_service() -> TokenIssuanceService:
    """Build an issuance service around the shared store and clients."""
    settings = _settings()
    return TokenIssuanceService(
        store=get_token_store(),
        renderer=get_qr_renderer(),
        messenger=get_messaging_client(),
        public_host=str(settings.public_host),
        purpose=settings.tokens.purpose,
        device_id=settings.tokens.device_id,
    )


def get_verification_service() -> TokenVerificationService:
    """Build a verification service around the shared store."""
    return TokenVerificationService(
        store=get_token_store(),
        event_log=get_event_log_client(),
    )


__all__ = [
    "get_event_log_client",
    "get_issuance_service",
    "get_messaging_client",
    "get_qr_renderer",
    "get_token_store",
    "get_verification_service",
]
