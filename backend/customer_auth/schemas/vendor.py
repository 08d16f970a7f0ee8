"""Vendor onboarding Marshmallow schemas."""

from __future__ import annotations

from marshmallow import fields

from .customer import BaseSchema


class InstalledSchema(BaseSchema):
    """Response payload once the OAuth redirect completed."""

    message = fields.String(required=True)
