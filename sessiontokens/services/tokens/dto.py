# sessiontokens/services/tokens/dto.py
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from types import MappingProxyType
from typing import Any, cast

from sessiontokens.services._shared.errors import (
    ConfigurationError,
    InvalidTokenArgumentError,
    TokenError,
    TokenErrorKind,
)

MIN_SECRET_BYTES = 32

# Registered claim names on the wire
SUBJECT = "sub"
ISSUED_AT = "iat"
EXPIRES_AT = "exp"
ROLE = "role"

RESERVED_CLAIMS = frozenset({SUBJECT, ISSUED_AT, EXPIRES_AT})


# ------------------------------ Key material ------------------------------ #


@dataclass(frozen=True, slots=True)
class SigningKey:
    """
    Symmetric HMAC key derived from a configured passphrase.

    :param material: Raw key bytes (UTF-8 encoding of the passphrase).
    :type material: bytes
    """

    material: bytes = field(repr=False)

    @classmethod
    def from_passphrase(cls, passphrase: str) -> SigningKey:
        """
        Derive a key from ``passphrase``.

        :raises ConfigurationError: If the passphrase is not a string or encodes
            to fewer than 32 bytes.
        """
        if not isinstance(passphrase, str):
            raise ConfigurationError("JWT secret must be a string")
        material = passphrase.encode("utf-8")
        if len(material) < MIN_SECRET_BYTES:
            raise ConfigurationError(
                f"JWT secret must be at least {MIN_SECRET_BYTES} bytes long"
            )
        return cls(material=material)

    def __repr__(self) -> str:
        return "SigningKey(material=<redacted>)"


# -------------------------------- Claims ---------------------------------- #


def _to_timestamp(value: datetime) -> int:
    return int(value.timestamp())


def _from_numeric_date(payload: Mapping[str, Any], name: str) -> datetime:
    raw = payload.get(name)
    # bool is an int subclass; reject it explicitly
    if isinstance(raw, bool) or not isinstance(raw, int | float):
        raise InvalidTokenArgumentError(f"Token claim '{name}' missing or not a NumericDate")
    return datetime.fromtimestamp(int(raw), tz=UTC)


@dataclass(frozen=True, slots=True)
class TokenClaims:
    """
    Verified payload of a token.

    :param subject: Principal identifier (``sub``).
    :type subject: str
    :param issued_at: Issue instant (``iat``), timezone-aware UTC.
    :type issued_at: datetime
    :param expires_at: Expiration instant (``exp``), timezone-aware UTC.
    :type expires_at: datetime
    :param extra: Every other claim, read-only.
    :type extra: Mapping[str, Any]
    """

    subject: str
    issued_at: datetime
    expires_at: datetime
    extra: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "extra", MappingProxyType(dict(self.extra)))

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> TokenClaims:
        """
        Build claims from a decoded (already verified) payload.

        :raises InvalidTokenArgumentError: If ``sub``, ``iat`` or ``exp`` is
            missing or has the wrong type.
        """
        subject = payload.get(SUBJECT)
        if not isinstance(subject, str):
            raise InvalidTokenArgumentError("Token claim 'sub' missing or not a string")
        return cls(
            subject=subject,
            issued_at=_from_numeric_date(payload, ISSUED_AT),
            expires_at=_from_numeric_date(payload, EXPIRES_AT),
            extra={k: v for k, v in payload.items() if k not in RESERVED_CLAIMS},
        )

    @property
    def role(self) -> str | None:
        value = self.extra.get(ROLE)
        return value if isinstance(value, str) else None

    def claim(self, name: str, default: Any = None) -> Any:
        """Look up a claim by its wire name, reserved claims included."""
        return self.as_dict().get(name, default)

    def is_expired(self, at: datetime) -> bool:
        """Return ``True`` when ``at`` is on or after the expiration instant."""
        return self.expires_at <= at

    def as_dict(self) -> dict[str, Any]:
        """Return the wire payload (NumericDate seconds for temporal claims)."""
        payload = dict(self.extra)
        payload[SUBJECT] = self.subject
        payload[ISSUED_AT] = _to_timestamp(self.issued_at)
        payload[EXPIRES_AT] = _to_timestamp(self.expires_at)
        return payload


# ------------------------------- Results ---------------------------------- #


@dataclass(frozen=True, slots=True)
class VerificationResult:
    """
    Outcome of verifying a token.

    Exactly one of the following holds:

    - ``error is None``: ``claims`` is set and the token is fresh.
    - ``error is EXPIRED``: the signature verified, ``claims`` is set but stale.
    - any other ``error``: ``claims`` is ``None``; nothing in the token is trusted.
    """

    claims: TokenClaims | None = None
    error: TokenErrorKind | None = None
    detail: str | None = None

    @classmethod
    def success(cls, claims: TokenClaims) -> VerificationResult:
        return cls(claims=claims)

    @classmethod
    def failure(cls, exc: TokenError, claims: TokenClaims | None = None) -> VerificationResult:
        if exc.kind is not TokenErrorKind.EXPIRED:
            claims = None
        return cls(claims=claims, error=exc.kind, detail=exc.detail)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def structurally_valid(self) -> bool:
        """Signature verified and claims parsed, regardless of expiry."""
        return self.error is None or self.error is TokenErrorKind.EXPIRED

    def unwrap(self) -> TokenClaims:
        """
        Return the claims or raise the error this result carries.

        :raises TokenError: The subclass matching :attr:`error`.
        """
        if self.error is not None:
            raise TokenError.from_kind(self.error, self.detail)
        return cast(TokenClaims, self.claims)


# ------------------------------ Output DTOs ------------------------------- #


@dataclass(frozen=True, slots=True)
class TokenPair:
    """
    Access and refresh tokens issued together for one principal.

    :param access_token: Encoded short-lived access JWT.
    :type access_token: str
    :param refresh_token: Encoded long-lived refresh JWT.
    :type refresh_token: str
    """

    access_token: str
    refresh_token: str
