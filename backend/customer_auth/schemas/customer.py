"""Customer-facing Marshmallow schemas (camelCase on the wire)."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields, validate


class BaseSchema(Schema):
    """Base schema enabling ordered output and ignoring unknown input keys."""

    class Meta:
        ordered = True
        unknown = EXCLUDE


class LoginSchema(BaseSchema):
    """Input payload for storefront login."""

    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(required=True, load_only=True, validate=validate.Length(min=1, max=255))


class AccessTokenSchema(BaseSchema):
    """Response payload containing an access token."""

    access_token = fields.String(required=True, data_key="accessToken")


class CustomerSchema(BaseSchema):
    """Response payload for ``GET /customers/me``."""

    id = fields.String(required=True)
    first_name = fields.String(allow_none=True, data_key="firstName")
