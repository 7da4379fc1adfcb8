"""
schemas/category_schema.py — Schema for per-user categories.

Load with partial=True for PATCH. Name uniqueness (DUPLICATE_CATEGORY) is
checked in category_service.py.

IMPORTANT: Inherits from marshmallow.Schema directly — never ma.Schema.
"""

from __future__ import annotations

from marshmallow import Schema, fields, validate

from backend.app.schemas.expense_schema import validate_non_empty_after_trim


class CategorySchema(Schema):
    """
    POST  /users/:uid/categories
    PATCH /users/:uid/categories/:cid  (partial=True)
    """

    name = fields.Str(
        required=True,
        validate=[
            validate.Length(
                min=1,
                max=50,
                error="Category name must be between 1 and 50 characters.",
            ),
            validate_non_empty_after_trim,
        ],
    )

    # "#RRGGBB"
    color = fields.Str(
        required=True,
        validate=validate.Regexp(
            r"^#[0-9A-Fa-f]{6}$",
            error="Color must be a hex value like #FF6B6B.",
        ),
    )

    icon = fields.Str(
        load_default=None,
        allow_none=True,
        validate=validate.Length(max=50),
    )
