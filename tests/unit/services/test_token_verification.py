# tests/unit/services/test_token_verification.py
from __future__ import annotations

import logging
from datetime import timedelta

import jwt
import pytest

from sessiontokens.services._shared.errors import (
    ExpiredTokenError,
    InvalidTokenArgumentError,
    MalformedTokenError,
    SignatureInvalidError,
    TokenErrorKind,
    UnsupportedAlgorithmError,
)
from tests.conftest import SECRET
from tests.helpers.tokens import (
    b64url,
    b64url_json,
    forge_payload,
    tamper_payload,
    tamper_signature,
    unsigned_token,
)


@pytest.fixture()
def token(service):
    return service.generate_access_token("alice", ["ROLE_USER"])


def _payload(clock, **extra):
    now = int(clock.current.timestamp())
    return {"sub": "alice", "iat": now, "exp": now + 3600, **extra}


# ------------------------------- Tampering -------------------------------- #
@pytest.mark.parametrize("index", [0, 10, 40, 80, -1])
def test_flipped_signature_is_rejected(service, token, index):
    tampered = tamper_signature(token, index)

    assert service.is_structurally_valid(tampered) is False
    with pytest.raises(SignatureInvalidError):
        service.parse_and_verify(tampered)


@pytest.mark.parametrize("index", [0, 5, 20, -1])
def test_flipped_payload_is_rejected(service, token, index):
    tampered = tamper_payload(token, index)

    assert service.is_structurally_valid(tampered) is False
    assert service.verify(tampered).error is TokenErrorKind.SIGNATURE_INVALID


def test_padding_bits_of_the_signature_are_covered(service, token):
    """The last character also carries unused bits; changing only those still fails."""
    tampered = tamper_signature(token, -1)

    result = service.verify(tampered)
    assert result.error is TokenErrorKind.SIGNATURE_INVALID
    assert result.claims is None


def test_forged_claims_are_never_returned(service, token):
    """Re-encoding the payload with a new subject keeps the old signature invalid."""
    forged = forge_payload(token, sub="admin", role="ROLE_ADMIN")

    result = service.verify(forged)
    assert result.error is TokenErrorKind.SIGNATURE_INVALID
    assert result.claims is None
    assert service.validate_against_identity(forged, "admin") is False


def test_token_from_another_key_is_rejected(service, other_service):
    foreign = other_service.generate_access_token("alice", ["ROLE_USER"])

    with pytest.raises(SignatureInvalidError):
        service.parse_and_verify(foreign)
    assert service.is_structurally_valid(foreign) is False
    assert service.validate_against_identity(foreign, "alice") is False


# ------------------------------- Algorithms ------------------------------- #
def test_other_hmac_algorithm_is_unsupported(service, clock):
    hs256 = jwt.encode(_payload(clock), SECRET.encode(), algorithm="HS256")

    with pytest.raises(UnsupportedAlgorithmError):
        service.parse_and_verify(hs256)


@pytest.mark.parametrize("alg", ["none", "None", "RS512", "FOO"])
def test_unsigned_or_unknown_algorithms_are_unsupported(service, clock, alg):
    forged = unsigned_token(_payload(clock), alg=alg)

    result = service.verify(forged)
    assert result.error is TokenErrorKind.UNSUPPORTED_ALGORITHM
    assert result.claims is None


def test_missing_algorithm_header_is_unsupported(service, clock):
    forged = ".".join((b64url_json({"typ": "JWT"}), b64url_json(_payload(clock)), ""))

    assert service.verify(forged).error is TokenErrorKind.UNSUPPORTED_ALGORITHM


# ------------------------------- Structure -------------------------------- #
@pytest.mark.parametrize(
    "raw",
    [
        "not-a-token",
        "only.two",
        "a.b.c",
        b64url(b"not json") + "." + b64url_json({"sub": "alice"}) + ".sig",
    ],
)
def test_structurally_broken_tokens_are_malformed(service, raw):
    with pytest.raises(MalformedTokenError):
        service.parse_and_verify(raw)
    assert service.is_structurally_valid(raw) is False


@pytest.mark.parametrize("raw", ["", "   ", None, 42])
def test_empty_or_non_string_input_is_invalid_argument(service, raw):
    with pytest.raises(InvalidTokenArgumentError):
        service.parse_and_verify(raw)


@pytest.mark.parametrize(
    "payload",
    [
        {"iat": 1, "exp": 2},  # no subject
        {"sub": "alice", "iat": 1},  # no expiration
        {"sub": "alice", "iat": 1, "exp": "tomorrow"},
        {"sub": "alice", "iat": True, "exp": 2},
    ],
)
def test_signed_payload_missing_required_claims_is_invalid_argument(service, payload):
    token = jwt.encode(payload, SECRET.encode(), algorithm="HS512")

    result = service.verify(token)
    assert result.error is TokenErrorKind.INVALID_ARGUMENT
    assert result.structurally_valid is False


# ------------------------------- Expiration ------------------------------- #
@pytest.mark.parametrize("lifetime", [timedelta(0), timedelta(seconds=-1), timedelta(days=-3)])
def test_zero_or_negative_lifetime_is_immediately_expired(service, lifetime):
    token = service.create_token({}, "alice", lifetime)

    assert service.is_expired(token) is True
    with pytest.raises(ExpiredTokenError):
        service.parse_and_verify(token)


def test_expired_token_is_still_structurally_valid(service):
    token = service.create_token({"role": "ROLE_USER"}, "alice", timedelta(0))

    result = service.verify(token)
    assert result.error is TokenErrorKind.EXPIRED
    assert result.claims is not None and result.claims.subject == "alice"
    assert service.is_structurally_valid(token) is True
    assert service.validate_against_identity(token, "alice") is False


def test_token_expires_exactly_at_its_expiration_instant(service, clock):
    token = service.create_token({}, "alice", timedelta(minutes=10))

    clock.advance(timedelta(minutes=9, seconds=59))
    assert service.is_expired(token) is False
    assert service.validate_against_identity(token, "alice") is True

    clock.advance(timedelta(seconds=1))
    assert service.is_expired(token) is True
    assert service.validate_against_identity(token, "alice") is False


def test_unverifiable_token_counts_as_expired(service, token):
    """Fail closed: nothing that cannot be verified is ever considered fresh."""
    assert service.is_expired("garbage") is True
    assert service.is_expired("") is True
    assert service.is_expired(tamper_signature(token)) is True


# -------------------------------- Identity -------------------------------- #
def test_validate_against_identity_accepts_matching_subject(service, token):
    assert service.validate_against_identity(token, "alice") is True


@pytest.mark.parametrize("expected", ["bob", "Alice", "alice ", ""])
def test_validate_against_identity_requires_exact_subject(service, token, expected):
    assert service.validate_against_identity(token, expected) is False


@pytest.mark.parametrize("raw", ["", "garbage", "a.b.c", None])
def test_boolean_gates_never_raise(service, raw):
    assert service.validate_against_identity(raw, "alice") is False
    assert service.is_structurally_valid(raw) is False
    assert service.is_expired(raw) is True


# ------------------------------- Projections ------------------------------ #
def test_extract_claim_applies_resolver_to_verified_claims(service, token):
    assert service.extract_claim(token, lambda claims: claims.role) == "ROLE_USER"


def test_projections_propagate_failure_kind(service, token):
    tampered = tamper_signature(token)

    with pytest.raises(SignatureInvalidError):
        service.extract_subject(tampered)
    with pytest.raises(SignatureInvalidError):
        service.extract_expiration(tampered)


# -------------------------------- Logging --------------------------------- #
def test_rejections_log_the_kind_but_never_the_token(service, token, caplog):
    tampered = tamper_signature(token)

    with caplog.at_level(logging.WARNING, logger="sessiontokens.services.tokens.service"):
        service.verify(tampered)

    assert [r.token_error for r in caplog.records] == ["signature_invalid"]
    assert tampered not in caplog.text
