"""Global pytest fixtures for the session token service."""

from __future__ import annotations

from collections.abc import Generator
from datetime import UTC, datetime, timedelta

import pytest
from flask import Flask
from flask.testing import FlaskClient

from sessiontokens import create_app
from sessiontokens.core.config import TestingConfig
from sessiontokens.core.extensions import get_token_service
from sessiontokens.services.tokens import TokenService

SECRET = "unit-test-secret-with-enough-entropy-for-hs512-0123456789abcdef!"
OTHER_SECRET = "a-completely-different-secret-used-for-cross-key-checks-01234567"


class FixedClock:
    """Deterministic clock returning a settable, timezone-aware UTC instant.

    Starts at the current second so tokens stay verifiable by third-party
    JWT libraries that consult the real clock.
    """

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime.now(UTC).replace(microsecond=0)

    def __call__(self) -> datetime:
        return self.current

    def advance(self, delta: timedelta) -> None:
        self.current = self.current + delta


@pytest.fixture()
def clock() -> FixedClock:
    """Provide a fresh fixed clock per test."""

    return FixedClock()


@pytest.fixture()
def service(clock: FixedClock) -> TokenService:
    """Build a TokenService with default lifetimes and the fixed clock."""

    return TokenService(SECRET, clock=clock)


@pytest.fixture()
def other_service(clock: FixedClock) -> TokenService:
    """TokenService holding a different signing key."""

    return TokenService(OTHER_SECRET, clock=clock)


@pytest.fixture(scope="session")
def app() -> Generator[Flask, None, None]:
    """Create a Flask application configured with :class:`TestingConfig`."""

    application = create_app(TestingConfig)
    yield application


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    """Return a Flask test client bound to the session app."""

    return app.test_client()


@pytest.fixture()
def app_service(app: Flask) -> TokenService:
    """Return the token service attached to the session app."""

    return get_token_service(app)


@pytest.fixture()
def auth_header(app_service: TokenService) -> dict[str, str]:
    """Authorization header carrying a fresh access token for ``alice``."""

    token = app_service.generate_access_token("alice", ["ROLE_USER"])
    return {"Authorization": f"Bearer {token}"}
