"""Service layer exports."""

from .issuance import IssuedToken, TokenIssuanceService
from .reclaimer import ExpiredTokenReclaimer
from .token_store import TokenStore
from .verification import TokenVerificationService

__all__ = [
    "ExpiredTokenReclaimer",
    "IssuedToken",
    "TokenIssuanceService",
    "TokenStore",
    "TokenVerificationService",
]
