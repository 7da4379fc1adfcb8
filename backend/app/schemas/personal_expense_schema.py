"""
schemas/personal_expense_schema.py — Schemas for a user's own expenses.

The same schema serves create and PATCH: routes load with partial=True for
updates, which lifts the required flags while keeping every field rule.
Category ownership is a store concern (personal_expense_service.py).

IMPORTANT: Inherits from marshmallow.Schema directly — never ma.Schema.
"""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields, validate

from backend.app.schemas.expense_schema import (
    validate_monetary_amount,
    validate_non_empty_after_trim,
)


class PersonalExpenseSchema(Schema):
    """
    POST  /users/:uid/expenses            (all required except date)
    PATCH /users/:uid/expenses/:eid       (partial=True)
    """

    amount = fields.Decimal(
        required=True,
        validate=validate_monetary_amount,
    )

    description = fields.Str(
        required=True,
        validate=[
            validate.Length(
                min=1,
                max=255,
                error="Description must be between 1 and 255 characters.",
            ),
            validate_non_empty_after_trim,
        ],
    )

    category_id = fields.Str(
        required=True,
        validate=[validate.Length(min=1, max=64), validate_non_empty_after_trim],
    )

    # Defaults to today in the service on create. Not nullable on PATCH.
    date = fields.Date()


class ExpenseListQuerySchema(Schema):
    """Query string for GET /users/:uid/expenses."""

    class Meta:
        unknown = EXCLUDE

    year = fields.Int(load_default=None, validate=validate.Range(min=1, max=9999))
    month = fields.Int(load_default=None, validate=validate.Range(min=1, max=12))
