"""
routes/users.py — User route handlers.

Endpoints (base url_prefix=/api/v1/users):
  POST /users             → 201  register user
  GET  /users?email=      → 200  find user by email
  GET  /users/:id         → 200  get user
"""

from __future__ import annotations

from flask import Blueprint, jsonify, request

from backend.app.errors import AppError, ErrorCode
from backend.app.extensions import get_store
from backend.app.schemas.user_schema import RegisterUserSchema
from backend.app.services import user_service

users_bp = Blueprint("users", __name__)


@users_bp.route("/", methods=["POST"], strict_slashes=False)
def register_user():
    """POST /users — Register a user by name and email."""
    data = RegisterUserSchema().load(request.get_json(force=True) or {})
    store = get_store()
    result = user_service.register_user(data=data, store=store)
    store.commit()
    return jsonify({"data": result, "warnings": []}), 201


@users_bp.route("/", methods=["GET"], strict_slashes=False)
def find_user():
    """GET /users?email= — Look a user up by email."""
    email = request.args.get("email")
    if not email:
        raise AppError(
            ErrorCode.MISSING_FIELD,
            "The email query parameter is required.",
            400,
            field="email",
        )
    result = user_service.find_user_by_email(email=email, store=get_store())
    return jsonify({"data": result, "warnings": []}), 200


@users_bp.route("/<string:user_id>", methods=["GET"])
def get_user(user_id: str):
    """GET /users/:id"""
    result = user_service.get_user(user_id=user_id, store=get_store())
    return jsonify({"data": result, "warnings": []}), 200
