"""Domain models for issued access tokens."""

from .token import TokenRecord, TokenStatus

__all__ = ["TokenRecord", "TokenStatus"]
