"""Session endpoint exposing the verified claims of the caller's bearer token."""

from __future__ import annotations

from flask import Blueprint

from sessiontokens.api.deps import current_claims, json_response, require_token, timing
from sessiontokens.schemas import ClaimsSchema

bp = Blueprint("session", __name__)

claims_schema = ClaimsSchema()


@bp.get("")
@timing
@require_token
def whoami():
    """Return the subject, role and validity window of the presented token."""

    return json_response({"data": claims_schema.dump(current_claims())})
