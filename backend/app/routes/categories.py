"""
routes/categories.py — Per-user category route handlers.

Endpoints (base url_prefix=/api/v1/users):
  GET    /users/:uid/categories        → 200  list (seeds defaults on first use)
  POST   /users/:uid/categories        → 201  add category
  PATCH  /users/:uid/categories/:cid   → 200  partial update
  DELETE /users/:uid/categories/:cid   → 200  delete, reassigning its expenses
"""

from __future__ import annotations

from flask import Blueprint, jsonify, request

from backend.app.extensions import get_store
from backend.app.models.category import Category
from backend.app.schemas.category_schema import CategorySchema
from backend.app.services import category_service

categories_bp = Blueprint("categories", __name__)


def _serialize_category(category: Category) -> dict:
    return {
        "id": category.id,
        "user_id": category.user_id,
        "name": category.name,
        "color": category.color,
        "icon": category.icon,
    }


@categories_bp.route("/<string:user_id>/categories", methods=["GET"])
def list_categories(user_id: str):
    store = get_store()
    categories = category_service.list_categories(user_id=user_id, store=store)
    # Listing may have seeded the defaults.
    store.commit()
    return jsonify({
        "data": [_serialize_category(c) for c in categories],
        "warnings": [],
    }), 200


@categories_bp.route("/<string:user_id>/categories", methods=["POST"])
def create_category(user_id: str):
    data = CategorySchema().load(request.get_json(force=True) or {})
    store = get_store()
    category = category_service.create_category(user_id=user_id, data=data, store=store)
    store.commit()
    return jsonify({"data": _serialize_category(category), "warnings": []}), 201


@categories_bp.route("/<string:user_id>/categories/<string:category_id>", methods=["PATCH"])
def update_category(user_id: str, category_id: str):
    data = CategorySchema().load(request.get_json(force=True) or {}, partial=True)
    store = get_store()
    category = category_service.update_category(
        user_id=user_id,
        category_id=category_id,
        data=data,
        store=store,
    )
    store.commit()
    return jsonify({"data": _serialize_category(category), "warnings": []}), 200


@categories_bp.route("/<string:user_id>/categories/<string:category_id>", methods=["DELETE"])
def delete_category(user_id: str, category_id: str):
    store = get_store()
    reassigned_to = category_service.delete_category(
        user_id=user_id,
        category_id=category_id,
        store=store,
    )
    store.commit()
    return jsonify({
        "data": {
            "deleted": True,
            "category_id": category_id,
            "reassigned_to": reassigned_to,
        },
        "warnings": [],
    }), 200
