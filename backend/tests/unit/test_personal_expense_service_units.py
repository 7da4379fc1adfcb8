"""
Unit tests for personal_expense_service.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from backend.app.errors import AppError, ErrorCode
from backend.app.services import personal_expense_service as service

from .conftest import category_id, make_user


def _create(store, user_id, cat_id, amount="5.00", day=date(2024, 3, 1), description="Lunch"):
    return service.create_expense(
        user_id,
        {"amount": Decimal(amount), "description": description, "category_id": cat_id, "date": day},
        store,
    )


def test_create_defaults_date_to_today(store):
    alice = make_user(store)
    food = category_id(store, alice, "Food & Dining")

    expense = service.create_expense(
        alice,
        {"amount": Decimal("5.00"), "description": "Lunch", "category_id": food},
        store,
    )

    assert expense.id.startswith("pexp-")
    assert expense.date == date.today()
    assert expense.created_at == expense.updated_at


def test_create_for_unknown_user(store):
    with pytest.raises(AppError) as exc_info:
        _create(store, "user-missing", "cat-1")

    assert exc_info.value.code == ErrorCode.USER_NOT_FOUND


def test_create_with_foreign_category(store):
    alice = make_user(store, "Alice")
    bob = make_user(store, "Bob")
    bob_food = category_id(store, bob, "Food & Dining")

    with pytest.raises(AppError) as exc_info:
        _create(store, alice, bob_food)

    assert exc_info.value.code == ErrorCode.CATEGORY_NOT_FOUND
    assert exc_info.value.field == "category_id"


def test_list_filters_by_year_and_month(store):
    alice = make_user(store)
    food = category_id(store, alice, "Food & Dining")
    jan = _create(store, alice, food, day=date(2024, 1, 9))
    feb = _create(store, alice, food, day=date(2024, 2, 9))
    old_feb = _create(store, alice, food, day=date(2023, 2, 9))

    assert service.list_expenses(alice, store) == [feb, jan, old_feb]
    assert service.list_expenses(alice, store, year=2024) == [feb, jan]
    assert service.list_expenses(alice, store, month=2) == [feb, old_feb]
    assert service.list_expenses(alice, store, year=2024, month=2) == [feb]


def test_update_changes_only_given_fields(store):
    alice = make_user(store)
    food = category_id(store, alice, "Food & Dining")
    other = category_id(store, alice, "Other")
    expense = _create(store, alice, food)

    updated = service.update_expense(alice, expense.id, {"category_id": other}, store)

    assert updated.category_id == other
    assert updated.amount == Decimal("5.00")
    assert updated.description == "Lunch"


def test_other_users_expense_is_not_found(store):
    alice = make_user(store, "Alice")
    bob = make_user(store, "Bob")
    expense = _create(store, alice, category_id(store, alice, "Food & Dining"))

    with pytest.raises(AppError) as exc_info:
        service.get_expense(bob, expense.id, store)

    assert exc_info.value.code == ErrorCode.EXPENSE_NOT_FOUND


def test_delete(store):
    alice = make_user(store)
    expense = _create(store, alice, category_id(store, alice, "Food & Dining"))

    service.delete_expense(alice, expense.id, store)

    assert store.get_personal_expense(expense.id) is None
