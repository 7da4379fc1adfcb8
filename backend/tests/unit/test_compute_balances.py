"""
tests/unit/test_compute_balances.py — Unit tests for the pairwise balance engine
                                      (build_ledger, net_balances, calculate_balances).

What this file proves:
  - The ledger always sums to exactly Decimal 0
  - Nobody ever owes themselves
  - Each unordered pair yields at most one directed balance
  - Settled expenses contribute nothing
  - Differences at or below one cent are treated as settled
  - Ids that are no longer members still carry their debts
  - The result does not depend on expense order

Unit test constraints:
  - No database, no Flask, no store.
  - Members and expenses are SimpleNamespace objects with the ORM attribute names.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from types import SimpleNamespace

from backend.app.services.balance_service import (
    BALANCE_EPSILON,
    build_ledger,
    calculate_balances,
    ledger_total,
    net_balances,
)


# ── Factories ──────────────────────────────────────────────────────────────

def _members(*user_ids: str) -> list[SimpleNamespace]:
    return [SimpleNamespace(user_id=uid) for uid in user_ids]


def _expense(
        paid_by: str,
        amount: str,
        participants: list[str],
        settled: bool = False,
        expense_id: str = "exp-1",
) -> SimpleNamespace:
    return SimpleNamespace(
        id=expense_id,
        paid_by=paid_by,
        amount=Decimal(amount),
        settled=settled,
        splits=[SimpleNamespace(user_id=uid) for uid in participants],
    )


def _as_set(balances: list[dict]) -> set[tuple[str, str, Decimal]]:
    return {(b["user_id"], b["other_user_id"], b["amount"]) for b in balances}


# ── Basic scenarios ────────────────────────────────────────────────────────

def test_no_expenses_gives_no_balances():
    assert calculate_balances(_members("a", "b"), []) == []


def test_simple_two_way_split():
    result = calculate_balances(
        _members("a", "b"),
        [_expense("a", "100.00", ["a", "b"])],
    )

    assert result == [{"user_id": "b", "other_user_id": "a", "amount": Decimal("50.00")}]


def test_opposite_expenses_are_netted():
    result = calculate_balances(
        _members("a", "b"),
        [
            _expense("a", "100.00", ["a", "b"]),
            _expense("b", "40.00", ["a", "b"]),
        ],
    )

    assert result == [{"user_id": "b", "other_user_id": "a", "amount": Decimal("30.00")}]


def test_equal_opposite_expenses_cancel_out():
    result = calculate_balances(
        _members("a", "b"),
        [
            _expense("a", "50.00", ["a", "b"]),
            _expense("b", "50.00", ["a", "b"]),
        ],
    )

    assert result == []


def test_three_way_split():
    result = calculate_balances(
        _members("a", "b", "c"),
        [_expense("a", "90.00", ["a", "b", "c"])],
    )

    assert _as_set(result) == {
        ("b", "a", Decimal("30.00")),
        ("c", "a", Decimal("30.00")),
    }


def test_uneven_division_rounds_to_cents():
    result = calculate_balances(
        _members("a", "b", "c"),
        [_expense("a", "100.00", ["a", "b", "c"])],
    )

    assert {b["amount"] for b in result} == {Decimal("33.33")}
    assert len(result) == 2


def test_share_comes_from_split_count_not_group_size():
    result = calculate_balances(
        _members("a", "b", "c"),
        [_expense("a", "30.00", ["a", "b"])],
    )

    assert result == [{"user_id": "b", "other_user_id": "a", "amount": Decimal("15.00")}]


# ── Exclusions ─────────────────────────────────────────────────────────────

def test_settled_expenses_are_ignored():
    result = calculate_balances(
        _members("a", "b"),
        [
            _expense("a", "100.00", ["a", "b"], settled=True),
            _expense("b", "20.00", ["a", "b"]),
        ],
    )

    assert result == [{"user_id": "a", "other_user_id": "b", "amount": Decimal("10.00")}]


def test_all_settled_gives_no_balances():
    result = calculate_balances(
        _members("a", "b"),
        [_expense("a", "100.00", ["a", "b"], settled=True)],
    )

    assert result == []


def test_payer_as_only_participant_owes_nobody():
    result = calculate_balances(_members("a", "b"), [_expense("a", "25.00", ["a"])])

    assert result == []


def test_expense_without_splits_is_skipped_with_warning(caplog):
    with caplog.at_level(logging.WARNING, logger="backend.app.services.balance_service"):
        result = calculate_balances(
            _members("a", "b"),
            [_expense("a", "25.00", [], expense_id="exp-empty")],
        )

    assert result == []
    assert "exp-empty" in caplog.text


# ── Epsilon ────────────────────────────────────────────────────────────────

def test_one_cent_difference_is_treated_as_settled():
    # 0.02 / 2 = 0.01, which is not more than the epsilon.
    result = calculate_balances(_members("a", "b"), [_expense("a", "0.02", ["a", "b"])])

    assert result == []


def test_two_cent_difference_is_reported():
    result = calculate_balances(_members("a", "b"), [_expense("a", "0.04", ["a", "b"])])

    assert result == [{"user_id": "b", "other_user_id": "a", "amount": Decimal("0.02")}]


def test_net_balances_uses_epsilon_boundary():
    ledger = {
        "a": {"b": BALANCE_EPSILON, "c": Decimal("0.0101")},
        "b": {"a": -BALANCE_EPSILON},
        "c": {"a": Decimal("-0.0101")},
    }

    assert net_balances(ledger) == [
        {"user_id": "a", "other_user_id": "c", "amount": Decimal("0.01")},
    ]


def test_net_balances_rounds_half_up():
    ledger = {"a": {"b": Decimal("-2.005")}, "b": {"a": Decimal("2.005")}}

    assert net_balances(ledger) == [
        {"user_id": "b", "other_user_id": "a", "amount": Decimal("2.01")},
    ]


# ── Ghost members ──────────────────────────────────────────────────────────

def test_removed_member_still_owes(caplog):
    with caplog.at_level(logging.WARNING, logger="backend.app.services.balance_service"):
        result = calculate_balances(
            _members("a"),
            [_expense("a", "40.00", ["a", "gone"])],
        )

    assert result == [{"user_id": "gone", "other_user_id": "a", "amount": Decimal("20.00")}]
    assert "gone" in caplog.text


def test_payer_who_is_not_a_member_is_owed():
    result = calculate_balances(
        _members("a", "b"),
        [_expense("outsider", "30.00", ["outsider", "a", "b"])],
    )

    assert _as_set(result) == {
        ("a", "outsider", Decimal("10.00")),
        ("b", "outsider", Decimal("10.00")),
    }


# ── Structural invariants ──────────────────────────────────────────────────

_MIXED_EXPENSES = [
    _expense("a", "100.00", ["a", "b", "c"], expense_id="e1"),
    _expense("b", "45.50", ["a", "b"], expense_id="e2"),
    _expense("c", "12.34", ["a", "b", "c", "d"], expense_id="e3"),
    _expense("d", "9.99", ["c", "d"], expense_id="e4"),
    _expense("a", "70.00", ["b", "d", "ghost"], expense_id="e5"),
]


def test_ledger_sums_to_zero():
    ledger = build_ledger(["a", "b", "c", "d"], _MIXED_EXPENSES)

    assert ledger_total(ledger) == Decimal("0")
    for user_id, row in ledger.items():
        for other_user_id, value in row.items():
            assert ledger[other_user_id][user_id] == -value


def test_ledger_is_seeded_for_every_member_pair():
    ledger = build_ledger(["a", "b", "c"], [])

    assert ledger == {
        "a": {"b": Decimal("0"), "c": Decimal("0")},
        "b": {"a": Decimal("0"), "c": Decimal("0")},
        "c": {"a": Decimal("0"), "b": Decimal("0")},
    }


def test_no_self_debt_and_one_direction_per_pair():
    result = calculate_balances(_members("a", "b", "c", "d"), _MIXED_EXPENSES)

    pairs = [frozenset((b["user_id"], b["other_user_id"])) for b in result]
    assert all(b["user_id"] != b["other_user_id"] for b in result)
    assert len(pairs) == len(set(pairs))
    assert all(b["amount"] > BALANCE_EPSILON for b in result)


def test_result_does_not_depend_on_expense_order():
    members = _members("a", "b", "c", "d")

    forward = calculate_balances(members, _MIXED_EXPENSES)
    backward = calculate_balances(members, list(reversed(_MIXED_EXPENSES)))

    assert _as_set(forward) == _as_set(backward)
