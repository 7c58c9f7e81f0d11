"""Token service wiring for the Flask application."""

from __future__ import annotations

import logging

from flask import Flask, current_app

from sessiontokens.services.tokens import TokenService

EXTENSION_KEY = "token_service"

log = logging.getLogger(__name__)


def init_app(app: Flask, service: TokenService | None = None) -> TokenService:
    """Build the token service from ``app.config`` and attach it to ``app``.

    Parameters
    ----------
    app: flask.Flask
        Application receiving the service under
        ``app.extensions["token_service"]``.
    service: TokenService | None, optional
        Pre-built instance to attach instead (e.g. one with a fixed clock).

    Raises
    ------
    ConfigurationError
        Propagated from :class:`TokenService` when the secret is too short;
        the application must not start.
    """
    if service is None:
        service = TokenService.from_config(app.config)
    app.extensions[EXTENSION_KEY] = service
    log.info(
        "Token service ready: alg=%s access_ttl=%s refresh_ttl=%s",
        service.algorithm,
        service.access_ttl,
        service.refresh_ttl,
    )
    return service


def get_token_service(app: Flask | None = None) -> TokenService:
    """Return the token service bound to ``app`` (defaults to ``current_app``)."""
    target = app if app is not None else current_app
    service = target.extensions.get(EXTENSION_KEY)
    if service is None:
        raise RuntimeError("Token service is not initialized. Call init_app() first.")
    return service
