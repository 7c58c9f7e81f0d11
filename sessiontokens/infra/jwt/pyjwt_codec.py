# sessiontokens/infra/jwt/pyjwt_codec.py
from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from typing import Any

import jwt

from sessiontokens.services._shared.errors import (
    InvalidTokenArgumentError,
    MalformedTokenError,
    SignatureInvalidError,
    UnsupportedAlgorithmError,
)
from sessiontokens.services._shared.ports import TokenCodec
from sessiontokens.services.tokens.dto import SigningKey

DEFAULT_ALGORITHM = "HS512"

# Only the signature is checked here. Temporal claims are checked by the
# service against its own clock; ``sub`` by TokenClaims. Every other
# registered claim round-trips untouched.
_DECODE_OPTIONS: dict[str, Any] = {
    "verify_signature": True,
    "verify_exp": False,
    "verify_iat": False,
    "verify_nbf": False,
    "verify_aud": False,
    "verify_iss": False,
    "verify_jti": False,
    "verify_sub": False,
}


def _is_canonical_segment(segment: str) -> bool:
    """Return ``False`` when ``segment`` decodes but is not its own re-encoding.

    A flipped final character only touches the unused padding bits, so lenient
    decoders yield the original bytes. Undecodable segments count as canonical
    and are left to PyJWT to report as malformed.
    """
    try:
        raw = base64.urlsafe_b64decode(segment + "=" * (-len(segment) % 4))
    except (binascii.Error, ValueError):
        return True
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii") == segment


def _has_tampered_encoding(token: str) -> bool:
    segments = token.split(".")
    if len(segments) != 3:
        return False
    return not all(_is_canonical_segment(segment) for segment in segments)


@dataclass(frozen=True, slots=True)
class PyJWTCodec(TokenCodec):
    """
    Adapter signing and verifying compact JWS tokens with PyJWT.

    .. note::
       Only ``algorithm`` is accepted on decode, so a token whose header
       declares ``none`` or any other algorithm is rejected before its
       payload is looked at.

    .. note::
       Segments are compared with their canonical base64url re-encoding, so
       the byte-identical variants a lenient decoder would accept are
       reported as signature failures whatever the installed PyJWT does.
    """

    key: SigningKey
    algorithm: str = DEFAULT_ALGORITHM

    def encode(self, payload: dict[str, Any]) -> str:
        return jwt.encode(payload, self.key.material, algorithm=self.algorithm)

    def decode(self, token: str) -> dict[str, Any]:
        try:
            payload = jwt.decode(
                token,
                self.key.material,
                algorithms=[self.algorithm],
                options=_DECODE_OPTIONS,
            )
        except jwt.InvalidAlgorithmError as exc:
            raise UnsupportedAlgorithmError() from exc
        # InvalidSignatureError subclasses DecodeError; keep it first.
        except jwt.InvalidSignatureError as exc:
            raise SignatureInvalidError() from exc
        except jwt.DecodeError as exc:
            if _has_tampered_encoding(token):
                raise SignatureInvalidError() from exc
            raise MalformedTokenError() from exc
        except jwt.InvalidTokenError as exc:
            raise InvalidTokenArgumentError() from exc
        if _has_tampered_encoding(token):
            raise SignatureInvalidError()
        return payload
