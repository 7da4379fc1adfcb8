"""
Unit tests for report_service. `today` is pinned so timeframes are stable.

Fixture data (today = 2024-05-15):
  personal  10.00 Food & Dining   2024-05-02
  personal   5.00 Transportation  2024-05-14
  personal   7.00 Food & Dining   2024-04-30
  group    100.00 paid by Alice, split with Bob, 2024-05-10  → Alice's share 50
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from backend.app.errors import AppError, ErrorCode
from backend.app.services import expense_service, personal_expense_service, report_service

from .conftest import category_id, make_group, make_user

TODAY = date(2024, 5, 15)


@pytest.fixture
def alice(store) -> str:
    alice = make_user(store, "Alice")
    food = category_id(store, alice, "Food & Dining")
    transport = category_id(store, alice, "Transportation")
    for amount, cat, day in (
        ("10.00", food, date(2024, 5, 2)),
        ("5.00", transport, date(2024, 5, 14)),
        ("7.00", food, date(2024, 4, 30)),
    ):
        personal_expense_service.create_expense(
            alice,
            {"amount": Decimal(amount), "description": "x", "category_id": cat, "date": day},
            store,
        )

    group_id, _ = make_group(store, alice, "Bob")
    expense_service.create_shared_expense(
        group_id,
        {
            "amount": Decimal("100.00"),
            "description": "Hotel",
            "date": date(2024, 5, 10),
            "paid_by": alice,
            "member_ids": None,
        },
        store,
    )
    return alice


def test_month_summary(store, alice):
    summary = report_service.get_spending_summary(alice, store, "month", today=TODAY)

    assert summary["personal_total"] == Decimal("15.00")
    assert summary["group_total"] == Decimal("50")
    assert summary["total"] == Decimal("65")
    assert [(c["name"], c["value"]) for c in summary["categories"]] == [
        ("Group Expenses", Decimal("50")),
        ("Food & Dining", Decimal("10.00")),
        ("Transportation", Decimal("5.00")),
    ]
    assert summary["categories"][0]["category_id"] == report_service.GROUP_EXPENSES_KEY


def test_week_summary_is_last_seven_days(store, alice):
    summary = report_service.get_spending_summary(alice, store, "week", today=TODAY)

    assert summary["personal_total"] == Decimal("5.00")
    assert summary["group_total"] == Decimal("50")


def test_year_summary(store, alice):
    summary = report_service.get_spending_summary(alice, store, "year", today=TODAY)

    assert summary["personal_total"] == Decimal("22.00")


def test_settled_group_expense_still_counts(store, alice):
    group = store.list_groups_for_user(alice)[0]
    expense = store.list_shared_expenses(group.id)[0]
    expense_service.settle_expense(expense.id, store)

    summary = report_service.get_spending_summary(alice, store, "month", today=TODAY)

    assert summary["group_total"] == Decimal("50")


def test_summary_without_group_spending_has_no_group_entry(store):
    bob = make_user(store, "Bob")

    summary = report_service.get_spending_summary(bob, store, "month", today=TODAY)

    assert summary["total"] == Decimal("0")
    assert summary["categories"] == []


def test_category_totals_include_empty_categories(store, alice):
    food = category_id(store, alice, "Food & Dining")

    month = report_service.get_category_totals(alice, store, "month", today=TODAY)
    everything = report_service.get_category_totals(alice, store, "all", today=TODAY)

    assert len(month) == 8
    assert month[food] == Decimal("10.00")
    assert everything[food] == Decimal("17.00")
    assert month[category_id(store, alice, "Housing")] == Decimal("0")


def test_expenses_by_period(store, alice):
    by_month = report_service.get_expenses_by_period(alice, store, "month")
    by_year = report_service.get_expenses_by_period(alice, store, "year")

    assert by_month == [
        {"date": "2024-04", "total": Decimal("7.00")},
        {"date": "2024-05", "total": Decimal("15.00")},
    ]
    assert by_year == [{"date": "2024", "total": Decimal("22.00")}]


def test_current_month_total(store, alice):
    assert report_service.get_current_month_total(alice, store, today=TODAY) == Decimal("15.00")


@pytest.mark.parametrize(
    "call",
    [
        lambda store, uid: report_service.get_spending_summary(uid, store, "all"),
        lambda store, uid: report_service.get_category_totals(uid, store, "week"),
        lambda store, uid: report_service.get_expenses_by_period(uid, store, "week"),
    ],
)
def test_unsupported_timeframes(store, alice, call):
    with pytest.raises(AppError) as exc_info:
        call(store, alice)

    assert exc_info.value.code == ErrorCode.INVALID_TIMEFRAME
    assert exc_info.value.http_status == 400
