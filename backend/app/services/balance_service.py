"""
services/balance_service.py — Pairwise balance engine.

This file is the SINGLE SOURCE OF TRUTH for how group balances are computed.
Do not reimplement the accumulation or netting rules anywhere else.

Layer rules:
  - No Flask imports. No current_app, request, g, or HTTP knowledge.
  - build_ledger(), net_balances() and calculate_balances() are pure: they
    take plain members/expenses (ORM instances or any object with the same
    attributes) and return plain dicts and lists. No store, no I/O.
  - get_balance_response() is the only function here that reads the store.

Algorithm:
  1. Seed a ledger {user: {other: Decimal}} with 0 for every ordered pair
     of distinct current members. ledger[A][B] is how much A net-owes B;
     a negative value is the reverse debt.
  2. For every UNSETTLED expense, share = amount / len(splits). The share is
     re-derived from the split count, not read from split.amount.
  3. For every split whose user is not the payer:
         ledger[member][payer] += share
         ledger[payer][member] -= share
  4. Walk each unordered pair once and emit a single directed Balance when
     |net| > BALANCE_EPSILON.

Ids that are not current members (removed members, or a payer who was never
a member) are added to the ledger on demand. They produce "ghost" balances
rather than errors; the display layer decides how to name them.

Zero-sum guarantee:
  Every += in step 3 is mirrored by an equal -=, so the sum of the whole
  ledger is exactly Decimal 0 before netting. get_balance_response() asserts
  this and surfaces a violation as a 500.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from backend.app.errors import AppError, ErrorCode
from backend.app.store.interface import RecordStore

logger = logging.getLogger(__name__)

# Net debts at or below this are floating residue from equal-split division,
# not real money owed.
BALANCE_EPSILON = Decimal("0.01")

_CENT = Decimal("0.01")


def _to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() first so floats keep their printed value, not their binary one.
    return Decimal(str(value))


# ── Core algorithm ─────────────────────────────────────────────────────────

def build_ledger(
        member_ids: Iterable[str],
        expenses: Iterable,
) -> dict[str, dict[str, Decimal]]:
    """
    Accumulates unsettled expenses into a signed pairwise ledger.

    Args:
        member_ids: Current group member ids.
        expenses:   Objects with amount, paid_by, settled and splits
                    (each split exposing user_id).

    Returns:
        {user_id: {other_user_id: Decimal}} where value > 0 means user_id
        owes other_user_id. ledger[A][B] == -ledger[B][A] for every pair.
    """
    member_ids = list(member_ids)
    ledger: dict[str, dict[str, Decimal]] = {
        uid: {other: Decimal("0") for other in member_ids if other != uid}
        for uid in member_ids
    }
    known = set(member_ids)
    ghosts: set[str] = set()

    for expense in expenses:
        if expense.settled:
            continue

        splits = list(expense.splits)
        if not splits:
            logger.warning(
                "Skipping expense %s: it has no splits to divide between.",
                getattr(expense, "id", "?"),
            )
            continue

        payer = expense.paid_by
        share = _to_decimal(expense.amount) / len(splits)

        for split in splits:
            member = split.user_id
            if member == payer:
                continue

            for uid in (member, payer):
                if uid not in known:
                    ghosts.add(uid)

            ledger.setdefault(member, {}).setdefault(payer, Decimal("0"))
            ledger.setdefault(payer, {}).setdefault(member, Decimal("0"))
            ledger[member][payer] += share
            ledger[payer][member] -= share

    if ghosts:
        logger.warning(
            "Balance computation touched ids that are not current members: %s",
            ", ".join(sorted(ghosts)),
        )

    return ledger


def ledger_total(ledger: dict[str, dict[str, Decimal]]) -> Decimal:
    """
    Sum of every ordered-pair entry. Exactly zero for a well-built ledger.

    Mirrored entries are added to each other first. Summing a long run of
    28-digit quotients in arbitrary order can round away the last digit and
    leave a residue that is not a real imbalance.
    """
    total = Decimal("0")
    for user_id, row in ledger.items():
        for other_user_id, value in row.items():
            mirror = ledger.get(other_user_id, {}).get(user_id)
            if mirror is None:
                total += value
            elif user_id < other_user_id:
                total += value + mirror
    return total


def net_balances(
        ledger: dict[str, dict[str, Decimal]],
        epsilon: Decimal = BALANCE_EPSILON,
) -> list[dict]:
    """
    Reduces a ledger to at most one directed debt per unordered pair.

    Returns:
        List of {"user_id": debtor, "other_user_id": creditor,
                 "amount": Decimal} with amount > 0, rounded to cents.
        Pairs whose net is within epsilon are omitted.
    """
    balances: list[dict] = []
    processed: set[tuple[str, str]] = set()

    for user_id, row in ledger.items():
        for other_user_id, value in row.items():
            pair = tuple(sorted((user_id, other_user_id)))
            if pair in processed:
                continue
            processed.add(pair)

            if abs(value) <= epsilon:
                continue

            if value > 0:
                debtor, creditor = user_id, other_user_id
            else:
                debtor, creditor = other_user_id, user_id

            balances.append({
                "user_id": debtor,
                "other_user_id": creditor,
                "amount": abs(value).quantize(_CENT, rounding=ROUND_HALF_UP),
            })

    return balances


def calculate_balances(members: Iterable, expenses: Iterable) -> list[dict]:
    """
    Net pairwise balances for a group.

    Args:
        members:  Current group members (objects exposing user_id).
        expenses: The group's shared expenses, settled or not.

    Returns:
        Output of net_balances(). An empty expense set returns [].
    """
    member_ids = [m.user_id for m in members]
    return net_balances(build_ledger(member_ids, expenses))


# ── Store-backed entry point ───────────────────────────────────────────────

def get_balance_response(group_id: str, store: RecordStore) -> dict:
    """
    Builds the payload for GET /groups/:id/balances.

    Enriches each balance with display names. Ids that are no longer members
    fall back to the raw id as their name.

    Raises:
        AppError(GROUP_NOT_FOUND, 404)  -- group does not exist.
        AppError(INTERNAL_ERROR, 500)   -- ledger is not zero-sum.
    """
    group = store.get_group(group_id)
    if group is None:
        raise AppError(
            ErrorCode.GROUP_NOT_FOUND,
            f"Group {group_id} does not exist.",
            404,
        )

    expenses = store.list_shared_expenses(group_id)
    ledger = build_ledger(group.member_ids(), expenses)

    total = ledger_total(ledger)
    if total != Decimal("0"):
        # Not reachable from build_ledger(); means the accumulation rule was broken.
        raise AppError(
            ErrorCode.INTERNAL_ERROR,
            f"Balance integrity check failed: ledger sum was {total} (expected 0). "
            f"Group {group_id} has inconsistent data.",
            500,
        )

    names = {m.user_id: m.display_name for m in group.members}
    balances = [
        {
            "user_id": b["user_id"],
            "user_name": names.get(b["user_id"], b["user_id"]),
            "other_user_id": b["other_user_id"],
            "other_user_name": names.get(b["other_user_id"], b["other_user_id"]),
            "amount": b["amount"],
        }
        for b in net_balances(ledger)
    ]

    return {
        "group_id": group_id,
        "balances": balances,
        "unsettled_expense_count": sum(1 for e in expenses if not e.settled),
    }
