"""
sessiontokens.services._shared.ports
====================================

*Ports* (hexagonal interfaces) that decouple the service layer from the
concrete token encoding library.

Modules
-------
- :mod:`token_codec`:
    Defines :class:`~.TokenCodec`, the abstraction for signing and verifying
    compact tokens. The PyJWT adapter lives under ``sessiontokens.infra.jwt``.
"""

from __future__ import annotations

from .token_codec import TokenCodec

__all__ = ["TokenCodec"]
