"""Flask CLI commands for issuing and inspecting tokens during development."""

from __future__ import annotations

import json
import logging

import click
from flask import current_app
from flask.cli import with_appcontext

from sessiontokens.core.extensions import get_token_service
from sessiontokens.schemas import ClaimsSchema, TokenPairSchema

LOGGER = logging.getLogger(__name__)


def _ensure_non_production() -> None:
    """Refuse to mint tokens unless the app runs in debug or testing mode."""
    config = current_app.config
    if not (config.get("DEBUG") or config.get("TESTING")):
        raise click.UsageError("'flask tokens issue' is restricted to non-production environments.")


@click.group("tokens")
def tokens_cli() -> None:
    """Issue and inspect session tokens."""


@tokens_cli.command("issue")
@click.argument("subject")
@click.option("--role", "roles", multiple=True, help="Authority; only the first is embedded.")
@with_appcontext
def issue(subject: str, roles: tuple[str, ...]) -> None:
    """Print an access/refresh token pair for SUBJECT as JSON."""
    _ensure_non_production()
    pair = get_token_service().issue_token_pair(subject, list(roles))
    LOGGER.info("Issued token pair via CLI for subject=%s", subject)
    click.echo(json.dumps(TokenPairSchema().dump(pair), indent=2))


@tokens_cli.command("inspect")
@click.argument("token")
@with_appcontext
def inspect(token: str) -> None:
    """Verify TOKEN and print its claims, or the reason it was rejected."""
    result = get_token_service().verify(token)
    if result.claims is not None:
        click.echo(json.dumps(ClaimsSchema().dump(result.claims), indent=2))
    if result.error is not None:
        click.echo(f"rejected: {result.error.value}", err=True)
        raise click.exceptions.Exit(1)
