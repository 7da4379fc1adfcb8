"""
services/personal_expense_service.py — A user's own (non-shared) expenses.

Rules enforced here:
  USER_NOT_FOUND (404)      — the owning user must exist
  EXPENSE_NOT_FOUND (404)   — unknown id, or an expense owned by another user
  CATEGORY_NOT_FOUND (404)  — category_id must be one of the user's categories

Layer rules:
  - No Flask imports.
  - Commits are the route's responsibility.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone

from backend.app.errors import AppError, ErrorCode
from backend.app.models.personal_expense import PersonalExpense
from backend.app.services.user_service import get_user_or_404
from backend.app.store.interface import RecordStore, new_id

logger = logging.getLogger(__name__)


# ── Private helpers ────────────────────────────────────────────────────────

def _get_owned_expense_or_404(
        user_id: str,
        expense_id: str,
        store: RecordStore,
) -> PersonalExpense:
    expense = store.get_personal_expense(expense_id)
    if expense is None or expense.user_id != user_id:
        raise AppError(
            ErrorCode.EXPENSE_NOT_FOUND,
            f"Expense {expense_id} does not exist.",
            404,
        )
    return expense


def _validate_category(user_id: str, category_id: str, store: RecordStore) -> None:
    """Raises CATEGORY_NOT_FOUND (404) unless the user owns category_id."""
    category = store.get_category(category_id)
    if category is None or category.user_id != user_id:
        raise AppError(
            ErrorCode.CATEGORY_NOT_FOUND,
            f"Category {category_id} does not exist.",
            404,
            field="category_id",
        )


# ── Public service functions ───────────────────────────────────────────────

def create_expense(user_id: str, data: dict, store: RecordStore) -> PersonalExpense:
    """
    Records a personal expense.

    Args:
        data: Validated dict from PersonalExpenseSchema.
              Keys: amount, description, category_id, date (optional, defaults to today).
    """
    get_user_or_404(user_id, store)
    _validate_category(user_id, data["category_id"], store)

    now = datetime.now(timezone.utc)
    expense = PersonalExpense(
        id=new_id("pexp"),
        user_id=user_id,
        category_id=data["category_id"],
        amount=data["amount"],
        description=data["description"],
        date=data.get("date") or date.today(),
        created_at=now,
        updated_at=now,
    )
    store.save_personal_expense(expense)

    logger.info("Personal expense %s (%s) recorded for user %s.", expense.id, expense.amount, user_id)
    return expense


def list_expenses(
        user_id: str,
        store: RecordStore,
        year: int | None = None,
        month: int | None = None,
) -> list[PersonalExpense]:
    """
    Returns the user's expenses, newest date first.

    year and month narrow the result independently: month alone matches
    that month in every year.
    """
    get_user_or_404(user_id, store)
    expenses = [
        e for e in store.list_personal_expenses(user_id)
        if (year is None or e.date.year == year)
        and (month is None or e.date.month == month)
    ]
    return sorted(expenses, key=lambda e: e.date, reverse=True)


def get_expense(user_id: str, expense_id: str, store: RecordStore) -> PersonalExpense:
    return _get_owned_expense_or_404(user_id, expense_id, store)


def update_expense(
        user_id: str,
        expense_id: str,
        data: dict,
        store: RecordStore,
) -> PersonalExpense:
    """
    Applies a partial update. Only keys present in data are changed.

    Raises:
      AppError(EXPENSE_NOT_FOUND, 404)
      AppError(CATEGORY_NOT_FOUND, 404) — new category_id not owned by the user
    """
    expense = _get_owned_expense_or_404(user_id, expense_id, store)

    if "category_id" in data:
        _validate_category(user_id, data["category_id"], store)

    for field in ("amount", "description", "date", "category_id"):
        if field in data:
            setattr(expense, field, data[field])

    expense.updated_at = datetime.now(timezone.utc)
    store.save_personal_expense(expense)

    logger.info("Personal expense %s updated (%s).", expense_id, ", ".join(sorted(data)))
    return expense


def delete_expense(user_id: str, expense_id: str, store: RecordStore) -> None:
    expense = _get_owned_expense_or_404(user_id, expense_id, store)
    store.delete_personal_expense(expense.id)
    logger.info("Personal expense %s deleted.", expense_id)
