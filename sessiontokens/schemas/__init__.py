from __future__ import annotations

from .token import ClaimsSchema, TokenPairSchema

__all__ = ["ClaimsSchema", "TokenPairSchema"]
