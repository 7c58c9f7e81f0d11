"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and never import Flask or HTTP
concerns. The translation to HTTP responses (RFC 7807) is handled by
``sessiontokens/core/errors.py``.

Token failures are tagged with a :class:`TokenErrorKind` so callers can branch
on the kind without matching exception classes (see
:class:`~sessiontokens.services.tokens.dto.VerificationResult`).
"""

from __future__ import annotations

from enum import Enum
from typing import ClassVar

# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - The API layer translates them to problem responses.
    """

    pass


class ConfigurationError(Exception):
    """
    Raised when the token service is constructed with an unusable configuration.

    Notes
    -----
    Intentionally **not** a :class:`ServiceError`: it is raised once at
    construction time and must stop the application from starting.
    """

    pass


# --------------------------------------------------------------------------- #
# Token verification errors
# --------------------------------------------------------------------------- #


class TokenErrorKind(str, Enum):
    """Reason a token was rejected."""

    EXPIRED = "expired"
    MALFORMED = "malformed"
    UNSUPPORTED_ALGORITHM = "unsupported_algorithm"
    SIGNATURE_INVALID = "signature_invalid"
    INVALID_ARGUMENT = "invalid_argument"


class TokenError(ServiceError):
    """
    Base class for token parsing and verification failures.

    :param detail: Short human-readable explanation (never contains the token).
    :type detail: str | None
    """

    kind: ClassVar[TokenErrorKind]
    default_detail: ClassVar[str] = "Invalid token"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)

    @staticmethod
    def from_kind(kind: TokenErrorKind, detail: str | None = None) -> TokenError:
        """Build the concrete error subclass registered for ``kind``."""
        return _ERRORS_BY_KIND[kind](detail)


class ExpiredTokenError(TokenError):
    """Signature is valid but the ``exp`` claim is in the past."""

    kind = TokenErrorKind.EXPIRED
    default_detail = "Token expired"


class MalformedTokenError(TokenError):
    """Token is not a well-formed compact JWS (segments, base64 or JSON)."""

    kind = TokenErrorKind.MALFORMED
    default_detail = "Token malformed"


class UnsupportedAlgorithmError(TokenError):
    """Header declares an algorithm other than the one the service signs with."""

    kind = TokenErrorKind.UNSUPPORTED_ALGORITHM
    default_detail = "Token algorithm unsupported"


class SignatureInvalidError(TokenError):
    """Signature does not match the payload under the signing key."""

    kind = TokenErrorKind.SIGNATURE_INVALID
    default_detail = "Token signature validation failed"


class InvalidTokenArgumentError(TokenError):
    """Empty input or a verified payload lacking the required claims."""

    kind = TokenErrorKind.INVALID_ARGUMENT
    default_detail = "Token invalid"


_ERRORS_BY_KIND: dict[TokenErrorKind, type[TokenError]] = {
    cls.kind: cls
    for cls in (
        ExpiredTokenError,
        MalformedTokenError,
        UnsupportedAlgorithmError,
        SignatureInvalidError,
        InvalidTokenArgumentError,
    )
}
