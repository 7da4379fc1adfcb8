"""
routes/reports.py — Spending report handlers. Read-only.

Endpoints (base url_prefix=/api/v1/users):
  GET /users/:uid/reports/summary?timeframe=week|month|year      → 200
  GET /users/:uid/reports/categories?timeframe=month|year|all    → 200
  GET /users/:uid/reports/periods?period=day|month|year          → 200
  GET /users/:uid/reports/current-month                          → 200

Reports are computed relative to the server's current date.
"""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from backend.app.extensions import get_store
from backend.app.services import report_service

reports_bp = Blueprint("reports", __name__)


@reports_bp.route("/<string:user_id>/reports/summary", methods=["GET"])
def spending_summary(user_id: str):
    result = report_service.get_spending_summary(
        user_id=user_id,
        store=get_store(),
        timeframe=request.args.get("timeframe", "month"),
    )
    result["currency"] = current_app.config["DEFAULT_CURRENCY"]
    return jsonify({"data": result, "warnings": []}), 200


@reports_bp.route("/<string:user_id>/reports/categories", methods=["GET"])
def category_totals(user_id: str):
    timeframe = request.args.get("timeframe", "month")
    totals = report_service.get_category_totals(
        user_id=user_id,
        store=get_store(),
        timeframe=timeframe,
    )
    return jsonify({
        "data": {"timeframe": timeframe, "totals": totals},
        "warnings": [],
    }), 200


@reports_bp.route("/<string:user_id>/reports/periods", methods=["GET"])
def expenses_by_period(user_id: str):
    period = request.args.get("period", "month")
    result = report_service.get_expenses_by_period(
        user_id=user_id,
        store=get_store(),
        period=period,
    )
    return jsonify({
        "data": {"period": period, "totals": result},
        "warnings": [],
    }), 200


@reports_bp.route("/<string:user_id>/reports/current-month", methods=["GET"])
def current_month_total(user_id: str):
    total = report_service.get_current_month_total(user_id=user_id, store=get_store())
    return jsonify({"data": {"total": total}, "warnings": []}), 200
