"""
schemas/expense_schema.py — Marshmallow schemas for shared expense endpoints.

Validation responsibility:
  - This file:
      - Field types, lengths, decimal precision
      - DUPLICATE_SPLIT_USER (400) — the same id twice in member_ids
      - Non-empty-after-trim enforcement for description and ids
      - Surrounding whitespace stripped from ids before validation
  - services/expense_service.py:
      - INVALID_MEMBERSHIP (422)    — member_ids given as an empty list
      - SPLIT_USER_NOT_MEMBER (422) — requires the group's member list
      - PAYER_NOT_MEMBER (422)      — payer must be among the participants

IMPORTANT: Inherits from marshmallow.Schema directly — never ma.Schema.
           See extensions.py for the full explanation.
"""

from __future__ import annotations

from decimal import Decimal

from marshmallow import Schema, ValidationError, fields, pre_load, validate, validates

from backend.app.errors import ErrorCode


# ── Shared monetary amount validator ──────────────────────────────────────
#
# Used by CreateSharedExpenseSchema and the personal expense schemas.
# Max 2 decimal places, strictly positive. Input with more than 2 decimal
# places is REJECTED with INVALID_AMOUNT_PRECISION, never rounded.
# ──────────────────────────────────────────────────────────────────────────

def validate_monetary_amount(value: Decimal) -> None:
    """
    Validates a monetary Decimal value:
      - Must be strictly greater than zero.
      - Must have at most 2 decimal places.

    The app error handler detects INVALID_AMOUNT_PRECISION by matching the
    raised ValidationError message to the known ErrorCode constant.
    """
    if value <= Decimal("0"):
        raise ValidationError("Amount must be greater than zero.")

    #   Decimal("10.123").as_tuple().exponent == -3  → 3 dp → REJECT
    #   Decimal("10.12").as_tuple().exponent  == -2  → 2 dp → accept
    if value.as_tuple().exponent < -2:
        raise ValidationError(ErrorCode.INVALID_AMOUNT_PRECISION)


def validate_non_empty_after_trim(value: str) -> None:
    """
    Raises ValidationError if the string is blank or contains only whitespace.
    Mirrors the DB CHECK(LENGTH(TRIM(...)) > 0) constraints at the API layer.
    """
    if not value.strip():
        raise ValidationError("This field must not be blank or contain only whitespace.")


def strip_id_fields(data, keys: tuple[str, ...]):
    """
    Returns a copy of the raw payload with surrounding whitespace removed
    from the named id fields (strings, or lists of strings). Anything that
    is not the expected shape is left for field validation to reject.
    """
    if not isinstance(data, dict):
        return data
    data = dict(data)
    for key in keys:
        value = data.get(key)
        if isinstance(value, str):
            data[key] = value.strip()
        elif isinstance(value, list):
            data[key] = [v.strip() if isinstance(v, str) else v for v in value]
    return data


_user_id_field = dict(
    validate=[
        validate.Length(min=1, max=64, error="User ids must be between 1 and 64 characters."),
        validate_non_empty_after_trim,
    ],
)


class CreateSharedExpenseSchema(Schema):
    """
    POST /groups/:id/expenses

    member_ids is optional: when omitted the expense is split between
    every current member of the group. An explicit empty list is passed
    through and rejected by the service with INVALID_MEMBERSHIP. date defaults to today in
    the service.
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

    date = fields.Date(load_default=None)

    paid_by = fields.Str(required=True, **_user_id_field)

    member_ids = fields.List(
        fields.Str(**_user_id_field),
        load_default=None,
    )

    @pre_load
    def strip_ids(self, data, **kwargs):
        return strip_id_fields(data, ("paid_by", "member_ids"))

    @validates("member_ids")
    def validate_member_ids(self, value: list[str] | None, **kwargs) -> None:
        """DUPLICATE_SPLIT_USER (400): the same id appears twice."""
        if value is not None and len(value) != len(set(value)):
            raise ValidationError(ErrorCode.DUPLICATE_SPLIT_USER)
