"""
schemas/user_schema.py — Marshmallow schema for user registration.

DUPLICATE_EMAIL requires a store lookup and is checked in user_service.py.
"""

from __future__ import annotations

from marshmallow import Schema, fields, validate

from backend.app.schemas.expense_schema import validate_non_empty_after_trim


class RegisterUserSchema(Schema):
    """POST /users"""

    name = fields.Str(
        required=True,
        validate=[
            validate.Length(min=1, max=100, error="Name must be between 1 and 100 characters."),
            validate_non_empty_after_trim,
        ],
    )

    email = fields.Email(
        required=True,
        validate=validate.Length(max=255),
    )
