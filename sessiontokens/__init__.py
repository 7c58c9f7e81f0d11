"""Signed session tokens: HS512 access/refresh issuance and verification.

Exposes the application factory and the core :class:`TokenService` at
package level so callers can ``from sessiontokens import TokenService``.
"""

from __future__ import annotations

from .factory import create_app
from .services._shared.errors import ConfigurationError, TokenError, TokenErrorKind
from .services.tokens import TokenClaims, TokenPair, TokenService, VerificationResult

__all__ = [
    "ConfigurationError",
    "TokenClaims",
    "TokenError",
    "TokenErrorKind",
    "TokenPair",
    "TokenService",
    "VerificationResult",
    "create_app",
]
