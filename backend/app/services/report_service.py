"""
services/report_service.py — Spending reports over a user's expenses.

Read-only. Nothing here writes to the store.

Timeframes (relative to `today`, which callers pass in so results are
reproducible):
  week   — from 7 days before today through today, inclusive
  month  — the calendar month containing today
  year   — the calendar year containing today
  all    — no date filter (category totals only)

A user's spending in a group is their own split amount, not the expense
total. Group spending counts whether or not the expense has been settled:
settling moves money between members, it does not undo the purchase.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date, timedelta
from decimal import Decimal

from backend.app.errors import AppError, ErrorCode
from backend.app.services.user_service import get_user_or_404
from backend.app.store.interface import RecordStore

GROUP_EXPENSES_KEY = "group-expenses"
GROUP_EXPENSES_NAME = "Group Expenses"
GROUP_EXPENSES_COLOR = "#9b87f5"
UNKNOWN_CATEGORY_COLOR = "#cccccc"

CATEGORY_TIMEFRAMES = ("month", "year", "all")
SUMMARY_TIMEFRAMES = ("week", "month", "year")
PERIODS = {
    "day": "%Y-%m-%d",
    "month": "%Y-%m",
    "year": "%Y",
}


# ── Private helpers ────────────────────────────────────────────────────────

def _invalid_timeframe(value: str, allowed) -> AppError:
    return AppError(
        ErrorCode.INVALID_TIMEFRAME,
        f"Timeframe {value!r} is not supported. Use one of: {', '.join(allowed)}.",
        400,
        field="timeframe",
    )


def _in_timeframe(day: date, timeframe: str, today: date) -> bool:
    if timeframe == "week":
        return today - timedelta(days=7) <= day <= today
    if timeframe == "month":
        return day.year == today.year and day.month == today.month
    if timeframe == "year":
        return day.year == today.year
    return True


def _group_share(user_id: str, timeframe: str, today: date, store: RecordStore) -> Decimal:
    """Sum of the user's split amounts across every group they belong to."""
    total = Decimal("0")
    for group in store.list_groups_for_user(user_id):
        for expense in store.list_shared_expenses(group.id):
            if not _in_timeframe(expense.date, timeframe, today):
                continue
            for split in expense.splits:
                if split.user_id == user_id:
                    total += Decimal(split.amount)
    return total


# ── Public service functions ───────────────────────────────────────────────

def get_category_totals(
        user_id: str,
        store: RecordStore,
        timeframe: str = "month",
        today: date | None = None,
) -> dict[str, Decimal]:
    """
    Personal spending per category id. Every category the user owns is
    present, with 0 when it has no expenses in the timeframe.
    """
    if timeframe not in CATEGORY_TIMEFRAMES:
        raise _invalid_timeframe(timeframe, CATEGORY_TIMEFRAMES)
    get_user_or_404(user_id, store)
    today = today or date.today()

    totals: dict[str, Decimal] = {
        c.id: Decimal("0") for c in store.list_categories(user_id)
    }
    for expense in store.list_personal_expenses(user_id):
        if expense.category_id in totals and _in_timeframe(expense.date, timeframe, today):
            totals[expense.category_id] += expense.amount
    return totals


def get_expenses_by_period(
        user_id: str,
        store: RecordStore,
        period: str = "month",
) -> list[dict]:
    """
    Personal spending bucketed by day ("YYYY-MM-DD"), month ("YYYY-MM") or
    year ("YYYY"), oldest bucket first.
    """
    if period not in PERIODS:
        raise AppError(
            ErrorCode.INVALID_TIMEFRAME,
            f"Period {period!r} is not supported. Use one of: {', '.join(PERIODS)}.",
            400,
            field="period",
        )
    get_user_or_404(user_id, store)

    buckets: dict[str, Decimal] = defaultdict(lambda: Decimal("0"))
    for expense in store.list_personal_expenses(user_id):
        buckets[expense.date.strftime(PERIODS[period])] += expense.amount

    return [{"date": key, "total": buckets[key]} for key in sorted(buckets)]


def get_current_month_total(
        user_id: str,
        store: RecordStore,
        today: date | None = None,
) -> Decimal:
    get_user_or_404(user_id, store)
    today = today or date.today()
    return sum(
        (e.amount for e in store.list_personal_expenses(user_id)
         if _in_timeframe(e.date, "month", today)),
        Decimal("0"),
    )


def get_spending_summary(
        user_id: str,
        store: RecordStore,
        timeframe: str = "month",
        today: date | None = None,
) -> dict:
    """
    Personal plus group spending for a timeframe.

    Returns:
        {"timeframe", "personal_total", "group_total", "total",
         "categories": [{"category_id", "name", "color", "value"}]}
        where categories is sorted by value, largest first, and the user's
        group share appears as a "Group Expenses" pseudo-category when
        non-zero.
    """
    if timeframe not in SUMMARY_TIMEFRAMES:
        raise _invalid_timeframe(timeframe, SUMMARY_TIMEFRAMES)
    get_user_or_404(user_id, store)
    today = today or date.today()

    by_category: dict[str, Decimal] = defaultdict(lambda: Decimal("0"))
    for expense in store.list_personal_expenses(user_id):
        if _in_timeframe(expense.date, timeframe, today):
            by_category[expense.category_id] += expense.amount

    personal_total = sum(by_category.values(), Decimal("0"))
    group_total = _group_share(user_id, timeframe, today, store)

    known = {c.id: c for c in store.list_categories(user_id)}
    breakdown = []
    for category_id, value in by_category.items():
        category = known.get(category_id)
        breakdown.append({
            "category_id": category_id,
            "name": category.name if category else "Unknown",
            "color": category.color if category else UNKNOWN_CATEGORY_COLOR,
            "value": value,
        })
    if group_total > 0:
        breakdown.append({
            "category_id": GROUP_EXPENSES_KEY,
            "name": GROUP_EXPENSES_NAME,
            "color": GROUP_EXPENSES_COLOR,
            "value": group_total,
        })
    breakdown.sort(key=lambda item: item["value"], reverse=True)

    return {
        "timeframe": timeframe,
        "personal_total": personal_total,
        "group_total": group_total,
        "total": personal_total + group_total,
        "categories": breakdown,
    }
