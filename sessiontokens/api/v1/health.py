"""Health check endpoint."""

from __future__ import annotations

from flask import Blueprint, current_app

from sessiontokens.api.deps import json_response, timing
from sessiontokens.core.extensions import get_token_service

bp = Blueprint("health", __name__)


@bp.get("/health")
@timing
def healthcheck():
    """Return application health and the active signing algorithm."""

    service = get_token_service()
    version = current_app.config.get("APP_VERSION", "dev")
    payload = {"status": "ok", "algorithm": service.algorithm, "version": version}
    return json_response(payload)
