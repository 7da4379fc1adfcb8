"""
services/category_service.py — Per-user expense categories.

Rules enforced here:
  CATEGORY_NOT_FOUND (404)  — unknown id, or a category owned by another user
  DUPLICATE_CATEGORY (409)  — names are unique per user, case-insensitively
  LAST_CATEGORY (422)       — a user always keeps at least one category

A user's category list is seeded with DEFAULT_CATEGORIES the first time it
is read while empty. Deleting a category moves its personal expenses to the
"Other" category, or to the first remaining category when "Other" is the
one being deleted or no longer exists.

Layer rules:
  - No Flask imports.
  - Commits are the route's responsibility.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from backend.app.errors import AppError, ErrorCode
from backend.app.models.category import Category
from backend.app.services.user_service import get_user_or_404
from backend.app.store.interface import RecordStore, new_id

logger = logging.getLogger(__name__)

FALLBACK_CATEGORY_NAME = "Other"

DEFAULT_CATEGORIES: tuple[dict, ...] = (
    {"name": "Food & Dining",  "color": "#FF6B6B", "icon": "utensils"},
    {"name": "Transportation", "color": "#48BEFF", "icon": "car"},
    {"name": "Housing",        "color": "#4E67EB", "icon": "home"},
    {"name": "Entertainment",  "color": "#9C62FF", "icon": "film"},
    {"name": "Shopping",       "color": "#FF8F6B", "icon": "shopping-bag"},
    {"name": "Utilities",      "color": "#4BD4A0", "icon": "bolt"},
    {"name": "Healthcare",     "color": "#FF6BB5", "icon": "heart"},
    {"name": FALLBACK_CATEGORY_NAME, "color": "#8E9196", "icon": "ellipsis-h"},
)


# ── Private helpers ────────────────────────────────────────────────────────

def _get_owned_category_or_404(
        user_id: str,
        category_id: str,
        store: RecordStore,
) -> Category:
    """Returns the category if user_id owns it, else CATEGORY_NOT_FOUND (404)."""
    category = store.get_category(category_id)
    if category is None or category.user_id != user_id:
        raise AppError(
            ErrorCode.CATEGORY_NOT_FOUND,
            f"Category {category_id} does not exist.",
            404,
        )
    return category


def _ensure_unique_name(
        name: str,
        existing: list[Category],
        exclude_id: str | None = None,
) -> None:
    lowered = name.lower()
    for category in existing:
        if category.id != exclude_id and category.name.lower() == lowered:
            raise AppError(
                ErrorCode.DUPLICATE_CATEGORY,
                f"A category named {name!r} already exists.",
                409,
                field="name",
            )


def _seed_defaults(user_id: str, store: RecordStore) -> list[Category]:
    for defaults in DEFAULT_CATEGORIES:
        store.save_category(Category(id=new_id("cat"), user_id=user_id, **defaults))
    logger.info("Seeded %d default categories for user %s.", len(DEFAULT_CATEGORIES), user_id)
    return store.list_categories(user_id)


# ── Public service functions ───────────────────────────────────────────────

def list_categories(user_id: str, store: RecordStore) -> list[Category]:
    """
    Returns the user's categories ordered by name, seeding the defaults
    when the user has none.
    """
    get_user_or_404(user_id, store)
    categories = store.list_categories(user_id)
    if not categories:
        categories = _seed_defaults(user_id, store)
    return categories


def create_category(user_id: str, data: dict, store: RecordStore) -> Category:
    """
    Adds a category for the user.

    Args:
        data: Validated dict from CategorySchema. Keys: name, color, icon (optional).
    """
    existing = list_categories(user_id, store)
    _ensure_unique_name(data["name"], existing)

    category = Category(
        id=new_id("cat"),
        user_id=user_id,
        name=data["name"],
        color=data["color"],
        icon=data.get("icon"),
    )
    store.save_category(category)

    logger.info("Category %s (%r) created for user %s.", category.id, category.name, user_id)
    return category


def update_category(
        user_id: str,
        category_id: str,
        data: dict,
        store: RecordStore,
) -> Category:
    """Applies a partial update (name, color, icon) to a category."""
    get_user_or_404(user_id, store)
    category = _get_owned_category_or_404(user_id, category_id, store)

    if "name" in data:
        _ensure_unique_name(data["name"], store.list_categories(user_id), exclude_id=category.id)
        category.name = data["name"]
    if "color" in data:
        category.color = data["color"]
    if "icon" in data:
        category.icon = data["icon"]

    store.save_category(category)
    logger.info("Category %s updated.", category_id)
    return category


def delete_category(user_id: str, category_id: str, store: RecordStore) -> str:
    """
    Deletes a category and reassigns its personal expenses.

    Returns:
        The id of the category that received the reassigned expenses.

    Raises:
      AppError(CATEGORY_NOT_FOUND, 404)
      AppError(LAST_CATEGORY, 422) — this is the user's only category
    """
    get_user_or_404(user_id, store)
    category = _get_owned_category_or_404(user_id, category_id, store)

    remaining = [c for c in store.list_categories(user_id) if c.id != category.id]
    if not remaining:
        raise AppError(
            ErrorCode.LAST_CATEGORY,
            "Cannot delete the only remaining category.",
            422,
        )

    target = next(
        (c for c in remaining if c.name.lower() == FALLBACK_CATEGORY_NAME.lower()),
        remaining[0],
    )

    moved = 0
    now = datetime.now(timezone.utc)
    for expense in store.list_personal_expenses(user_id):
        if expense.category_id == category.id:
            expense.category_id = target.id
            expense.updated_at = now
            store.save_personal_expense(expense)
            moved += 1

    store.delete_category(category.id)

    logger.info(
        "Category %s deleted; %d expenses moved to %s.",
        category_id, moved, target.id,
    )
    return target.id
