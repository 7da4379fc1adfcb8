"""
schemas/group_schema.py — Marshmallow schemas for group and membership endpoints.

Validation responsibility:
  - This file: field types, string lengths, non-empty checks (including trim),
    whitespace stripped from user ids.
  - services/group_service.py:
      - ALREADY_MEMBER   (membership check requires the stored group)
      - GROUP_NOT_FOUND  (requires a store lookup)

IMPORTANT: Inherits from marshmallow.Schema directly — never ma.Schema.
           See extensions.py for the full explanation.
"""

from __future__ import annotations

from marshmallow import Schema, fields, pre_load, validate

from backend.app.schemas.expense_schema import strip_id_fields, validate_non_empty_after_trim


class CreateGroupSchema(Schema):
    """
    POST /groups

    name: non-empty after trim, max 100 chars (mirrors the DB CHECK).
    created_by: the creating user's id; they become the first member.
    display_name: the creator's name inside the group. Defaults to their
                  registered name, or the id itself for unregistered users.
    """

    name = fields.Str(
        required=True,
        validate=[
            validate.Length(
                min=1,
                max=100,
                error="Group name must be between 1 and 100 characters.",
            ),
            validate_non_empty_after_trim,
        ],
    )

    description = fields.Str(
        load_default=None,
        allow_none=True,
        validate=validate.Length(max=1000),
    )

    created_by = fields.Str(
        required=True,
        validate=[validate.Length(min=1, max=64), validate_non_empty_after_trim],
    )

    display_name = fields.Str(
        load_default=None,
        validate=[validate.Length(min=1, max=100), validate_non_empty_after_trim],
    )

    @pre_load
    def strip_ids(self, data, **kwargs):
        return strip_id_fields(data, ("created_by",))


class AddMemberSchema(Schema):
    """
    POST /groups/:id/members

    user_id is optional: people can be added by name alone, in which case
    the service generates an id for them.
    """

    display_name = fields.Str(
        required=True,
        validate=[
            validate.Length(
                min=1,
                max=100,
                error="Display name must be between 1 and 100 characters.",
            ),
            validate_non_empty_after_trim,
        ],
    )

    user_id = fields.Str(
        load_default=None,
        validate=[validate.Length(min=1, max=64), validate_non_empty_after_trim],
    )

    @pre_load
    def strip_ids(self, data, **kwargs):
        return strip_id_fields(data, ("user_id",))
