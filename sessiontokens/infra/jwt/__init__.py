from __future__ import annotations

from .pyjwt_codec import DEFAULT_ALGORITHM, PyJWTCodec

__all__ = ["DEFAULT_ALGORITHM", "PyJWTCodec"]
