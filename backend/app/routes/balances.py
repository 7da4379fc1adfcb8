"""
routes/balances.py — Balance route handler.

Layer rules:
  - Call ONE service, return envelope.
  - No business logic. No DB queries. No bare SQL.

Endpoint (base url_prefix=/api/v1/groups):
  GET /groups/:id/balances  → 200  net pairwise balances
"""

from __future__ import annotations

from flask import Blueprint, jsonify

from backend.app.extensions import get_store
from backend.app.services import balance_service

balances_bp = Blueprint("balances", __name__)


@balances_bp.route("/<string:group_id>/balances", methods=["GET"])
def get_balances(group_id: str):
    """
    GET /groups/:id/balances

    Returns one directed debt per pair of people whose net exceeds the
    balance epsilon. Settled expenses are ignored. Ids of people who have
    left the group still appear, named by their raw id.

    The service asserts the ledger is zero-sum and raises INTERNAL_ERROR
    (500) otherwise.
    """
    result = balance_service.get_balance_response(group_id=group_id, store=get_store())
    return jsonify({"data": result, "warnings": []}), 200
