from __future__ import annotations

from typing import Any, Protocol


class TokenCodec(Protocol):
    """Port for signing claim payloads into compact tokens and verifying them back."""

    algorithm: str

    def encode(self, payload: dict[str, Any]) -> str: ...

    def decode(self, token: str) -> dict[str, Any]:
        """
        Verify ``token`` and return its payload.

        Implementations must check the signature before returning anything and
        raise a :class:`~sessiontokens.services._shared.errors.TokenError`
        subclass on failure. Temporal claims are **not** checked here.
        """
        ...
