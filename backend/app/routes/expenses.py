"""
routes/expenses.py — Shared expense route handlers.

Registered at url_prefix=/api/v1 (not /api/v1/expenses) because this blueprint
owns BOTH the group-scoped paths (/groups/:id/expenses) and the
expense-ID paths (/expenses/:id).

Layer rules:
  - Parse, validate, call ONE service, commit, return envelope.
  - No business logic. No DB queries. No bare SQL.
  - _serialize_expense() is a pure data-shape helper — not business logic.

Endpoints:
  POST   /groups/:id/expenses   → 201  create expense (equal split)
  GET    /groups/:id/expenses   → 200  list expenses, newest first
  GET    /expenses/:id          → 200  get expense + splits
  POST   /expenses/:id/settle   → 200  settle expense (idempotent)
  DELETE /expenses/:id          → 200  delete expense
"""

from __future__ import annotations

from flask import Blueprint, jsonify, request

from backend.app.extensions import get_store
from backend.app.models.shared_expense import SharedExpense
from backend.app.schemas.expense_schema import CreateSharedExpenseSchema
from backend.app.services import expense_service

expenses_bp = Blueprint("expenses", __name__)


# ── Serialization helper ───────────────────────────────────────────────────
# Pure data-shaping. No store access. Amounts as strings.

def _serialize_expense(expense: SharedExpense) -> dict:
    """Converts a SharedExpense ORM object to a plain dict for JSON output."""
    return {
        "id": expense.id,
        "group_id": expense.group_id,
        "amount": str(expense.amount),
        "description": expense.description,
        "date": expense.date.isoformat(),
        "paid_by": expense.paid_by,
        "settled": expense.settled,
        "created_at": expense.created_at.isoformat(),
        "updated_at": expense.updated_at.isoformat(),
        "splits": [
            {
                "user_id": s.user_id,
                "amount": str(s.amount),
                "settled": s.settled,
            }
            for s in expense.splits
        ],
    }


# ── Group-scoped expense routes ────────────────────────────────────────────

@expenses_bp.route("/groups/<string:group_id>/expenses", methods=["POST"])
def create_expense(group_id: str):
    """POST /groups/:id/expenses — Record a new shared expense, split equally."""
    data = CreateSharedExpenseSchema().load(request.get_json(force=True) or {})
    store = get_store()
    expense = expense_service.create_shared_expense(
        group_id=group_id,
        data=data,
        store=store,
    )
    store.commit()
    return jsonify({"data": _serialize_expense(expense), "warnings": []}), 201


@expenses_bp.route("/groups/<string:group_id>/expenses", methods=["GET"])
def list_expenses(group_id: str):
    """GET /groups/:id/expenses — List the group's expenses, settled included."""
    expenses = expense_service.list_group_expenses(group_id=group_id, store=get_store())
    return jsonify({
        "data": [_serialize_expense(e) for e in expenses],
        "warnings": [],
    }), 200


# ── Expense-ID routes ──────────────────────────────────────────────────────

@expenses_bp.route("/expenses/<string:expense_id>", methods=["GET"])
def get_expense(expense_id: str):
    """GET /expenses/:id — Get expense detail including splits."""
    expense = expense_service.get_shared_expense(expense_id=expense_id, store=get_store())
    return jsonify({"data": _serialize_expense(expense), "warnings": []}), 200


@expenses_bp.route("/expenses/<string:expense_id>/settle", methods=["POST"])
def settle_expense(expense_id: str):
    """POST /expenses/:id/settle — Mark the expense and its splits settled."""
    store = get_store()
    expense = expense_service.settle_expense(expense_id=expense_id, store=store)
    store.commit()
    return jsonify({"data": _serialize_expense(expense), "warnings": []}), 200


@expenses_bp.route("/expenses/<string:expense_id>", methods=["DELETE"])
def delete_expense(expense_id: str):
    """DELETE /expenses/:id — Delete the expense and its splits."""
    store = get_store()
    expense_service.delete_shared_expense(expense_id=expense_id, store=store)
    store.commit()
    return jsonify({
        "data": {
            "deleted": True,
            "expense_id": expense_id,
        },
        "warnings": [],
    }), 200
