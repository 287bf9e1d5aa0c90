"""Expose dependency helpers for FastAPI routers."""

from .clients import (
    get_event_log_client,
    get_issuance_service,
    get_messaging_client,
    get_qr_renderer,
    get_token_store,
    get_verification_service,
)

__all__ = [
    "get_event_log_client",
    "get_issuance_service",
    "get_messaging_client",
    "get_qr_renderer",
    "get_token_store",
    "get_verification_service",
]
