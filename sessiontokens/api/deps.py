"""Shared API helpers for bearer authentication and cross-cutting concerns."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar, cast

from flask import Response, current_app, g, jsonify, request

from sessiontokens.core.errors import Forbidden, Unauthorized
from sessiontokens.core.extensions import get_token_service
from sessiontokens.services.tokens import TokenClaims

F = TypeVar("F", bound=Callable[..., Any])

AUTH_HEADER = "Authorization"
BEARER_SCHEME = "bearer"


def bearer_token() -> str | None:
    """Return the token carried by ``Authorization: Bearer <token>``, if any.

    The scheme is matched case-insensitively; any other scheme counts as
    no credential at all.
    """

    header = request.headers.get(AUTH_HEADER, "")
    scheme, _, token = header.strip().partition(" ")
    if scheme.lower() != BEARER_SCHEME:
        return None
    token = token.strip()
    return token or None


def current_claims() -> TokenClaims:
    """Return the claims verified by :func:`require_token` for this request."""

    claims = g.get("token_claims")
    if claims is None:
        raise RuntimeError("current_claims() used outside a @require_token view")
    return cast(TokenClaims, claims)


def _authenticate() -> TokenClaims:
    token = bearer_token()
    if token is None:
        raise Unauthorized("Missing bearer token")
    # TokenError propagates and is translated to 401 by core.errors
    claims = get_token_service().parse_and_verify(token)
    g.token_claims = claims
    return claims


def require_token(func: F) -> F:
    """Ensure the request carries a verified, unexpired bearer token."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        _authenticate()
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def require_role(required: str) -> Callable[[F], F]:
    """Ensure the verified token's ``role`` claim equals ``required``."""

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any):
            claims = _authenticate()
            if claims.role != required:
                raise Forbidden("Insufficient role")
            return func(*args, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request.endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
