"""
services/expense_service.py — Shared (group) expense business logic.

Rules enforced here:
  INVALID_MEMBERSHIP (422)     — an expense needs at least one participant
  DUPLICATE_SPLIT_USER (422)   — a participant may appear only once
  SPLIT_USER_NOT_MEMBER (422)  — every participant must be a current group member
  PAYER_NOT_MEMBER (422)       — paid_by must be one of the participants

Equal split computation:
  - Every participant's share is amount / participant_count, kept to four
    decimal places. No remainder is redistributed, so sum(splits) may differ
    from amount by a fraction of a cent; the balance engine re-derives the
    share from the split count and absorbs the residue with its epsilon.
  - Participants default to the group's full membership at creation time.

Settlement:
  - settle_expense() marks the expense AND all its splits settled.
  - Settling an already-settled expense is a no-op: nothing is written,
    updated_at included.

Layer rules:
  - No Flask imports. No current_app, request, g, or HTTP knowledge.
  - Receives plain values and a RecordStore; returns ORM objects or raises
    AppError. Commits are the route's responsibility.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from decimal import ROUND_HALF_EVEN, Decimal

from backend.app.errors import AppError, ErrorCode
from backend.app.models.group import Group
from backend.app.models.shared_expense import SharedExpense
from backend.app.models.split import Split
from backend.app.store.interface import RecordStore, new_id

logger = logging.getLogger(__name__)

# Storage precision of Split.amount (Numeric(14, 4)).
SHARE_QUANTUM = Decimal("0.0001")


# ── Private helpers ────────────────────────────────────────────────────────

def _get_group_or_404(group_id: str, store: RecordStore) -> Group:
    """Returns the Group or raises GROUP_NOT_FOUND (404)."""
    group = store.get_group(group_id)
    if group is None:
        raise AppError(
            ErrorCode.GROUP_NOT_FOUND,
            f"Group {group_id} does not exist.",
            404,
        )
    return group


def _get_expense_or_404(expense_id: str, store: RecordStore) -> SharedExpense:
    """Returns the SharedExpense or raises EXPENSE_NOT_FOUND (404)."""
    expense = store.get_shared_expense(expense_id)
    if expense is None:
        raise AppError(
            ErrorCode.EXPENSE_NOT_FOUND,
            f"Expense {expense_id} does not exist.",
            404,
        )
    return expense


def _validate_participants_are_members(
        participant_ids: list[str],
        group: Group,
) -> None:
    """Raises SPLIT_USER_NOT_MEMBER (422) for the first participant not in the group."""
    member_set = set(group.member_ids())
    for uid in participant_ids:
        if uid not in member_set:
            raise AppError(
                ErrorCode.SPLIT_USER_NOT_MEMBER,
                f"User {uid} is not a member of group {group.id}.",
                422,
                field="member_ids",
            )


def _validate_payer_is_participant(paid_by: str, participant_ids: list[str]) -> None:
    """Raises PAYER_NOT_MEMBER (422) if the payer has no split in the expense."""
    if paid_by not in participant_ids:
        raise AppError(
            ErrorCode.PAYER_NOT_MEMBER,
            f"Payer {paid_by} is not one of the expense participants.",
            422,
            field="paid_by",
        )


# ── Equal-split allocator ──────────────────────────────────────────────────

def compute_equal_splits(amount: Decimal, member_ids: list[str]) -> list[dict]:
    """
    Divides amount equally between member_ids.

    Args:
        amount:     Positive expense total. Must be Decimal.
        member_ids: Ordered participant ids (the caller snapshots membership).

    Returns:
        One {"user_id", "amount", "settled": False} dict per member, in input
        order. Every amount is amount / len(member_ids) to four places.

    Raises:
        AppError(INVALID_MEMBERSHIP, 422)   -- member_ids is empty.
        AppError(DUPLICATE_SPLIT_USER, 422) -- an id appears twice.
    """
    if not member_ids:
        raise AppError(
            ErrorCode.INVALID_MEMBERSHIP,
            "An expense must be split between at least one member.",
            422,
            field="member_ids",
        )

    if len(set(member_ids)) != len(member_ids):
        raise AppError(
            ErrorCode.DUPLICATE_SPLIT_USER,
            "The same member appears more than once in the split.",
            422,
            field="member_ids",
        )

    share = (amount / Decimal(len(member_ids))).quantize(
        SHARE_QUANTUM, rounding=ROUND_HALF_EVEN
    )
    return [
        {"user_id": uid, "amount": share, "settled": False}
        for uid in member_ids
    ]


# ── Public service functions ───────────────────────────────────────────────

def create_shared_expense(
        group_id: str,
        data: dict,
        store: RecordStore,
) -> SharedExpense:
    """
    Records a new shared expense, split equally.

    Args:
        group_id: The group this expense belongs to.
        data:     Validated dict from CreateSharedExpenseSchema.
                  Keys: amount, description, date, paid_by, member_ids (optional).

    Returns:
        The new SharedExpense with settled=False and one Split per participant.
    """
    group = _get_group_or_404(group_id, store)

    amount: Decimal = data["amount"]
    paid_by: str = data["paid_by"]
    member_ids = data.get("member_ids")
    if member_ids is None:
        member_ids = group.member_ids()

    _validate_participants_are_members(member_ids, group)
    splits_data = compute_equal_splits(amount, member_ids)
    _validate_payer_is_participant(paid_by, member_ids)

    now = datetime.now(timezone.utc)
    expense = SharedExpense(
        id=new_id("exp"),
        group_id=group_id,
        amount=amount,
        description=data["description"],
        date=data.get("date") or date.today(),
        paid_by=paid_by,
        settled=False,
        created_at=now,
        updated_at=now,
        splits=[
            Split(user_id=s["user_id"], amount=s["amount"], settled=s["settled"])
            for s in splits_data
        ],
    )
    store.save_shared_expense(expense)

    logger.info(
        "Shared expense %s created in group %s: %s paid by %s, %d participants.",
        expense.id, group_id, amount, paid_by, len(splits_data),
    )
    return expense


def list_group_expenses(group_id: str, store: RecordStore) -> list[SharedExpense]:
    """All shared expenses for a group, newest date first."""
    _get_group_or_404(group_id, store)
    expenses = store.list_shared_expenses(group_id)
    return sorted(expenses, key=lambda e: e.date, reverse=True)


def get_shared_expense(expense_id: str, store: RecordStore) -> SharedExpense:
    return _get_expense_or_404(expense_id, store)


def settle_expense(expense_id: str, store: RecordStore) -> SharedExpense:
    """
    Marks an expense and all of its splits as settled.

    Idempotent: an already-settled expense is returned untouched.
    Settled expenses no longer contribute to balances.

    Raises:
        AppError(EXPENSE_NOT_FOUND, 404) -- expense does not exist.
    """
    expense = _get_expense_or_404(expense_id, store)

    if expense.settled:
        return expense

    expense.settled = True
    for split in expense.splits:
        split.settled = True
    expense.updated_at = datetime.now(timezone.utc)
    store.save_shared_expense(expense)

    logger.info("Shared expense %s settled.", expense_id)
    return expense


def delete_shared_expense(expense_id: str, store: RecordStore) -> None:
    """
    Deletes a shared expense and its splits.

    Raises:
        AppError(EXPENSE_NOT_FOUND, 404) -- expense does not exist.
    """
    expense = _get_expense_or_404(expense_id, store)
    store.delete_shared_expense(expense.id)
    logger.info("Shared expense %s deleted from group %s.", expense_id, expense.group_id)
