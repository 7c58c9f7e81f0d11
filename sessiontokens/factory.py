"""Application factory wiring the token service, logging and blueprints."""

from __future__ import annotations

from flask import Flask

from sessiontokens.core.config import BaseConfig, get_config
from sessiontokens.core.logger import configure_logging, init_app as init_logging
from sessiontokens.services.tokens import TokenService


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    token_service: TokenService | None = None,
) -> Flask:
    """Build and configure the Flask application.

    Parameters
    ----------
    config:
        Object (or import string) handed to :meth:`flask.Config.from_object`.
        Defaults to the class selected by ``APP_ENV``.
    token_service:
        Pre-built service to attach instead of building one from config.

    Raises
    ------
    ConfigurationError
        When the configured secret is too short; the app is never returned.
    """

    app = Flask(__name__)
    app.config.from_object(get_config() if config is None else config)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    from sessiontokens.core import extensions

    extensions.init_app(app, token_service)

    init_logging(app)

    from sessiontokens.api import init_app as init_api

    init_api(app)

    from sessiontokens.core import errors

    errors.init_app(app)

    from sessiontokens import cli

    cli.init_app(app)

    return app
