"""
Token issuance and verification service.

:class:`TokenService` is the sole producer and verifier of session tokens.
It holds only immutable state after construction (the signing key, two
lifetimes, the codec and the clock) so a single instance can be shared by
any number of concurrent callers.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from datetime import UTC, datetime, timedelta
from typing import Any, TypeVar

from sessiontokens.services._shared.errors import (
    ConfigurationError,
    InvalidTokenArgumentError,
    TokenError,
    TokenErrorKind,
)
from sessiontokens.services._shared.ports import TokenCodec
from sessiontokens.services.tokens.dto import (
    EXPIRES_AT,
    ISSUED_AT,
    ROLE,
    SUBJECT,
    SigningKey,
    TokenClaims,
    TokenPair,
    VerificationResult,
)

log = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_ACCESS_TTL = timedelta(hours=1)
DEFAULT_REFRESH_TTL = timedelta(days=7)

_LOG_MESSAGES: dict[TokenErrorKind, str] = {
    TokenErrorKind.EXPIRED: "JWT token expired",
    TokenErrorKind.MALFORMED: "JWT token malformed",
    TokenErrorKind.UNSUPPORTED_ALGORITHM: "JWT token unsupported",
    TokenErrorKind.SIGNATURE_INVALID: "JWT signature validation failed",
    TokenErrorKind.INVALID_ARGUMENT: "JWT token invalid",
}


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _ms(value: Any, name: str) -> timedelta:
    try:
        return timedelta(milliseconds=int(value))
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{name} must be an integer number of milliseconds") from exc


class TokenService:
    """
    Issue, parse and validate signed session tokens.

    Parameters
    ----------
    secret : str
        Signing passphrase. Must encode to at least 32 UTF-8 bytes.
    access_ttl : timedelta, optional
        Lifetime of access tokens. Defaults to one hour.
    refresh_ttl : timedelta, optional
        Lifetime of refresh tokens. Defaults to seven days.
    codec : TokenCodec | None, optional
        Wire codec. Defaults to :class:`~sessiontokens.infra.jwt.PyJWTCodec`
        (HS512) bound to the derived key.
    clock : Callable[[], datetime] | None, optional
        Returns the current timezone-aware UTC instant.

    Raises
    ------
    ConfigurationError
        If the secret is too short. This is fatal: the caller should not start.

    Notes
    -----
    Access and refresh tokens share one structure; nothing in the payload says
    which kind a token is. Callers must keep them apart.
    """

    __slots__ = ("_key", "_codec", "_clock", "access_ttl", "refresh_ttl")

    def __init__(
        self,
        secret: str,
        access_ttl: timedelta = DEFAULT_ACCESS_TTL,
        refresh_ttl: timedelta = DEFAULT_REFRESH_TTL,
        *,
        codec: TokenCodec | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._key = SigningKey.from_passphrase(secret)
        if codec is None:
            from sessiontokens.infra.jwt import PyJWTCodec

            codec = PyJWTCodec(key=self._key)
        self._codec = codec
        self._clock = clock or _utcnow
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl

    @classmethod
    def from_config(cls, config: Mapping[str, Any], **kwargs: Any) -> TokenService:
        """
        Build a service from a Flask-style configuration mapping.

        Reads ``JWT_SECRET``, ``JWT_EXPIRATION_MS`` and
        ``JWT_REFRESH_EXPIRATION_MS``; lifetimes are expressed in milliseconds.
        """
        return cls(
            config.get("JWT_SECRET") or "",
            access_ttl=_ms(
                config.get("JWT_EXPIRATION_MS", 3_600_000), "JWT_EXPIRATION_MS"
            ),
            refresh_ttl=_ms(
                config.get("JWT_REFRESH_EXPIRATION_MS", 604_800_000),
                "JWT_REFRESH_EXPIRATION_MS",
            ),
            **kwargs,
        )

    @property
    def algorithm(self) -> str:
        return self._codec.algorithm

    def now(self) -> datetime:
        return self._clock()

    # ------------------------------------------------------------------ #
    # Creation
    # ------------------------------------------------------------------ #

    def create_token(
        self, claims: Mapping[str, Any], subject: str, lifetime: timedelta
    ) -> str:
        """
        Sign ``claims`` plus ``sub``/``iat``/``exp`` into a compact token.

        Reserved claims always win over same-named entries in ``claims``.
        """
        now = self.now()
        payload = dict(claims)
        payload[SUBJECT] = subject
        payload[ISSUED_AT] = int(now.timestamp())
        payload[EXPIRES_AT] = int((now + lifetime).timestamp())
        return self._codec.encode(payload)

    def generate_access_token(self, subject: str, authorities: Sequence[str] = ()) -> str:
        """
        Issue an access token for ``subject``.

        Only the *first* authority is embedded, as the ``role`` claim; the
        surrounding authorization layer works with a single role.
        """
        claims: dict[str, Any] = {}
        if authorities:
            claims[ROLE] = authorities[0]
        return self.create_token(claims, subject, self.access_ttl)

    def generate_refresh_token(self, subject: str) -> str:
        return self.create_token({}, subject, self.refresh_ttl)

    def issue_token_pair(self, subject: str, authorities: Sequence[str] = ()) -> TokenPair:
        """Issue the access/refresh pair returned to a freshly authenticated client."""
        return TokenPair(
            access_token=self.generate_access_token(subject, authorities),
            refresh_token=self.generate_refresh_token(subject),
        )

    # ------------------------------------------------------------------ #
    # Parsing
    # ------------------------------------------------------------------ #

    def verify(self, token: str) -> VerificationResult:
        """
        Decode and verify ``token`` without raising.

        The signature is checked by the codec before any claim is read. An
        expired token still carries its (verified) claims on the result.
        """
        try:
            if not isinstance(token, str) or not token.strip():
                raise InvalidTokenArgumentError("Token must be a non-empty string")
            claims = TokenClaims.from_payload(self._codec.decode(token))
        except TokenError as exc:
            log.warning(_LOG_MESSAGES[exc.kind], extra={"token_error": exc.kind.value})
            return VerificationResult.failure(exc)

        if claims.is_expired(self.now()):
            log.warning(
                _LOG_MESSAGES[TokenErrorKind.EXPIRED],
                extra={"token_error": TokenErrorKind.EXPIRED.value},
            )
            return VerificationResult.failure(TokenError.from_kind(TokenErrorKind.EXPIRED), claims)
        return VerificationResult.success(claims)

    def parse_and_verify(self, token: str) -> TokenClaims:
        """
        Return the verified claims of ``token``.

        :raises ExpiredTokenError: Signature valid, ``exp`` passed.
        :raises MalformedTokenError: Not a well-formed compact token.
        :raises UnsupportedAlgorithmError: Header algorithm is not ours.
        :raises SignatureInvalidError: Signature does not match.
        :raises InvalidTokenArgumentError: Empty input or missing claims.
        """
        return self.verify(token).unwrap()

    def extract_claim(self, token: str, resolver: Callable[[TokenClaims], T]) -> T:
        return resolver(self.parse_and_verify(token))

    def extract_subject(self, token: str) -> str:
        return self.extract_claim(token, lambda claims: claims.subject)

    def extract_expiration(self, token: str) -> datetime:
        return self.extract_claim(token, lambda claims: claims.expires_at)

    # ------------------------------------------------------------------ #
    # Boolean gates (never raise)
    # ------------------------------------------------------------------ #

    def is_expired(self, token: str) -> bool:
        """Fail closed: a token whose expiration cannot be read counts as expired."""
        try:
            return self.extract_expiration(token) <= self.now()
        except TokenError:
            return True

    def validate_against_identity(self, token: str, expected_subject: str) -> bool:
        """
        Return ``True`` iff ``token`` verifies, is fresh and names ``expected_subject``.

        Subjects are compared exactly (case-sensitive, no normalization).
        """
        result = self.verify(token)
        if not result.ok:
            log.debug("JWT validation failed: %s", result.error.value if result.error else None)
            return False
        return result.claims is not None and result.claims.subject == expected_subject

    def is_structurally_valid(self, token: str) -> bool:
        """Return ``True`` iff the signature verifies, regardless of expiry or subject."""
        result = self.verify(token)
        if not result.structurally_valid:
            log.debug("JWT token validation failed")
        return result.structurally_valid

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(algorithm={self.algorithm!r}, "
            f"access_ttl={self.access_ttl!r}, refresh_ttl={self.refresh_ttl!r})"
        )
