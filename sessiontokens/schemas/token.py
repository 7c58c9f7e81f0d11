"""Token-related Marshmallow schemas."""

from __future__ import annotations

from marshmallow import Schema, fields


class ClaimsSchema(Schema):
    """Response payload exposing the verified claims of a bearer token."""

    subject = fields.String(required=True)
    role = fields.String(allow_none=True)
    issued_at = fields.AwareDateTime(required=True)
    expires_at = fields.AwareDateTime(required=True)
    extra = fields.Method("_dump_extra")

    def _dump_extra(self, obj) -> dict:
        return dict(obj.extra)


class TokenPairSchema(Schema):
    """Response payload containing an access/refresh token pair."""

    access_token = fields.String(required=True)
    refresh_token = fields.String(required=True)
    token_type = fields.Constant("bearer")
