"""
routes/groups.py — Group and membership route handlers.

Layer rules:
  - Parse, validate, call ONE service, commit, return envelope.
  - No business logic. No DB queries. No bare SQL.

Endpoints (base url_prefix=/api/v1/groups):
  POST   /groups                        → 201  create group
  GET    /groups?user_id=               → 200  list a user's groups
  GET    /groups/:id                    → 200  get group + members
  DELETE /groups/:id                    → 200  delete group and its expenses
  POST   /groups/:id/members            → 201  add member
  DELETE /groups/:id/members/:uid       → 200  remove member
"""

from __future__ import annotations

from flask import Blueprint, jsonify, request

from backend.app.errors import AppError, ErrorCode
from backend.app.extensions import get_store
from backend.app.schemas.group_schema import AddMemberSchema, CreateGroupSchema
from backend.app.services import group_service

groups_bp = Blueprint("groups", __name__)


@groups_bp.route("/", methods=["POST"], strict_slashes=False)
def create_group():
    """POST /groups — Create a new group. The creator becomes the first member."""
    data = CreateGroupSchema().load(request.get_json(force=True) or {})
    store = get_store()
    result = group_service.create_group(data=data, store=store)
    store.commit()
    return jsonify({"data": result, "warnings": []}), 201


@groups_bp.route("/", methods=["GET"], strict_slashes=False)
def list_groups():
    """GET /groups?user_id= — List all groups the user belongs to."""
    user_id = request.args.get("user_id")
    if not user_id:
        raise AppError(
            ErrorCode.MISSING_FIELD,
            "The user_id query parameter is required.",
            400,
            field="user_id",
        )
    result = group_service.list_groups(user_id=user_id, store=get_store())
    return jsonify({"data": result, "warnings": []}), 200


@groups_bp.route("/<string:group_id>", methods=["GET"])
def get_group(group_id: str):
    """GET /groups/:id — Get group details with member list."""
    result = group_service.get_group(group_id=group_id, store=get_store())
    return jsonify({"data": result, "warnings": []}), 200


@groups_bp.route("/<string:group_id>", methods=["DELETE"])
def delete_group(group_id: str):
    """DELETE /groups/:id — Delete a group together with its shared expenses."""
    store = get_store()
    group_service.delete_group(group_id=group_id, store=store)
    store.commit()
    return jsonify({
        "data": {
            "deleted": True,
            "group_id": group_id,
        },
        "warnings": [],
    }), 200


@groups_bp.route("/<string:group_id>/members", methods=["POST"])
def add_member(group_id: str):
    """POST /groups/:id/members — Add a member by display name and optional user_id."""
    data = AddMemberSchema().load(request.get_json(force=True) or {})
    store = get_store()
    result = group_service.add_member(group_id=group_id, data=data, store=store)
    store.commit()
    return jsonify({"data": result, "warnings": []}), 201


@groups_bp.route("/<string:group_id>/members/<string:user_id>", methods=["DELETE"])
def remove_member(group_id: str, user_id: str):
    """
    DELETE /groups/:id/members/:uid — Remove a member.

    Removing the last member deletes the group; group_deleted is then true.
    """
    store = get_store()
    group = group_service.remove_member(group_id=group_id, user_id=user_id, store=store)
    store.commit()
    return jsonify({
        "data": {
            "removed": True,
            "group_id": group_id,
            "user_id": user_id,
            "group_deleted": group is None,
        },
        "warnings": [],
    }), 200
