"""
routes/personal_expenses.py — A user's own expenses.

Endpoints (base url_prefix=/api/v1/users):
  GET    /users/:uid/expenses?year=&month=   → 200  list, newest first
  POST   /users/:uid/expenses                → 201  add
  GET    /users/:uid/expenses/:eid           → 200  get
  PATCH  /users/:uid/expenses/:eid           → 200  partial update
  DELETE /users/:uid/expenses/:eid           → 200  delete
"""

from __future__ import annotations

from flask import Blueprint, jsonify, request

from backend.app.extensions import get_store
from backend.app.models.personal_expense import PersonalExpense
from backend.app.schemas.personal_expense_schema import (
    ExpenseListQuerySchema,
    PersonalExpenseSchema,
)
from backend.app.services import personal_expense_service

personal_expenses_bp = Blueprint("personal_expenses", __name__)


def _serialize_expense(expense: PersonalExpense) -> dict:
    return {
        "id": expense.id,
        "user_id": expense.user_id,
        "category_id": expense.category_id,
        "amount": str(expense.amount),
        "description": expense.description,
        "date": expense.date.isoformat(),
        "created_at": expense.created_at.isoformat(),
        "updated_at": expense.updated_at.isoformat(),
    }


@personal_expenses_bp.route("/<string:user_id>/expenses", methods=["GET"])
def list_expenses(user_id: str):
    query = ExpenseListQuerySchema().load(request.args.to_dict())
    expenses = personal_expense_service.list_expenses(
        user_id=user_id,
        store=get_store(),
        year=query["year"],
        month=query["month"],
    )
    return jsonify({
        "data": [_serialize_expense(e) for e in expenses],
        "warnings": [],
    }), 200


@personal_expenses_bp.route("/<string:user_id>/expenses", methods=["POST"])
def create_expense(user_id: str):
    data = PersonalExpenseSchema().load(request.get_json(force=True) or {})
    store = get_store()
    expense = personal_expense_service.create_expense(user_id=user_id, data=data, store=store)
    store.commit()
    return jsonify({"data": _serialize_expense(expense), "warnings": []}), 201


@personal_expenses_bp.route("/<string:user_id>/expenses/<string:expense_id>", methods=["GET"])
def get_expense(user_id: str, expense_id: str):
    expense = personal_expense_service.get_expense(
        user_id=user_id,
        expense_id=expense_id,
        store=get_store(),
    )
    return jsonify({"data": _serialize_expense(expense), "warnings": []}), 200


@personal_expenses_bp.route("/<string:user_id>/expenses/<string:expense_id>", methods=["PATCH"])
def update_expense(user_id: str, expense_id: str):
    data = PersonalExpenseSchema().load(request.get_json(force=True) or {}, partial=True)
    store = get_store()
    expense = personal_expense_service.update_expense(
        user_id=user_id,
        expense_id=expense_id,
        data=data,
        store=store,
    )
    store.commit()
    return jsonify({"data": _serialize_expense(expense), "warnings": []}), 200


@personal_expenses_bp.route("/<string:user_id>/expenses/<string:expense_id>", methods=["DELETE"])
def delete_expense(user_id: str, expense_id: str):
    store = get_store()
    personal_expense_service.delete_expense(user_id=user_id, expense_id=expense_id, store=store)
    store.commit()
    return jsonify({
        "data": {
            "deleted": True,
            "expense_id": expense_id,
        },
        "warnings": [],
    }), 200
