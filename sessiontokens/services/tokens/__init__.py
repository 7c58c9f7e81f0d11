"""Token lifecycle: issuance, verification and validation."""

from __future__ import annotations

from .dto import SigningKey, TokenClaims, TokenPair, VerificationResult
from .service import TokenService

__all__ = ["SigningKey", "TokenClaims", "TokenPair", "TokenService", "VerificationResult"]
