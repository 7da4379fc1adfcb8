"""
tests/integration/conftest.py — Fixtures and helpers for all integration tests.

Design:
  - Tests run against in-memory SQLite through create_app("testing").
    Flask-SQLAlchemy pins in-memory SQLite to a single shared connection, so
    every request in the session sees the same database.
  - The schema is created once by the app factory (AUTO_CREATE_SCHEMA).
  - Between tests, all rows are deleted in FK-safe order so tests are isolated.

Helper functions (not fixtures) are provided for common operations:
  - register(client, ...)       → user dict
  - make_group(client, ...)     → group dict
  - add_member(client, ...)     → HTTP response
  - make_expense(client, ...)   → HTTP response
  - make_category(client, ...)  → HTTP response
  - make_personal_expense(...)  → HTTP response

These are plain functions (not pytest fixtures) so they can be called with
arbitrary arguments in any test without fixture parameterization overhead.
"""

from __future__ import annotations

import pytest

from backend.app import create_app
from backend.app.extensions import db as _db


# ═══════════════════════════════════════════════════════════════════════════
# Session-scoped app fixture
# ═══════════════════════════════════════════════════════════════════════════

@pytest.fixture(scope="session")
def app():
    """
    Creates the Flask application in 'testing' mode once for the entire test
    session and drops all tables at teardown.
    """
    flask_app = create_app("testing")

    yield flask_app

    with flask_app.app_context():
        _db.drop_all()


# ═══════════════════════════════════════════════════════════════════════════
# Function-scoped test isolation
# ═══════════════════════════════════════════════════════════════════════════

@pytest.fixture(autouse=True)
def clean_tables(app):
    """
    Deletes all rows after every test in FK-safe order.

    Children before parents: splits before shared_expenses before groups,
    personal_expenses before categories before users.
    """
    yield  # run the test

    with app.app_context():
        _db.session.rollback()  # discard any uncommitted state from a failed test

        from sqlalchemy import text
        with _db.engine.connect() as conn:
            conn.execute(text("DELETE FROM splits"))
            conn.execute(text("DELETE FROM shared_expenses"))
            conn.execute(text("DELETE FROM group_members"))
            conn.execute(text("DELETE FROM groups"))
            conn.execute(text("DELETE FROM personal_expenses"))
            conn.execute(text("DELETE FROM categories"))
            conn.execute(text("DELETE FROM users"))
            conn.commit()


# ═══════════════════════════════════════════════════════════════════════════
# Client fixture
# ═══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def client(app):
    """Flask test client. Each test gets a fresh client (function-scoped)."""
    return app.test_client()


# ═══════════════════════════════════════════════════════════════════════════
# Shared helper functions (not fixtures)
# ═══════════════════════════════════════════════════════════════════════════

def register(client, name: str = "Alice", email: str | None = None) -> dict:
    """Registers a new user and returns the user data dict."""
    if email is None:
        email = f"{name.lower()}@test.com"
    resp = client.post("/api/v1/users", json={"name": name, "email": email})
    assert resp.status_code == 201, f"register failed: {resp.get_json()}"
    return resp.get_json()["data"]


def make_group(
    client,
    created_by: str,
    name: str = "Test Group",
    display_name: str | None = None,
) -> dict:
    """
    Creates a group and returns the group data dict.
    created_by becomes the first member.
    """
    payload: dict = {"name": name, "created_by": created_by}
    if display_name is not None:
        payload["display_name"] = display_name
    resp = client.post("/api/v1/groups", json=payload)
    assert resp.status_code == 201, f"make_group failed: {resp.get_json()}"
    return resp.get_json()["data"]


def add_member(client, group_id: str, display_name: str, user_id: str | None = None):
    """Adds a member to a group. Returns the HTTP response."""
    payload: dict = {"display_name": display_name}
    if user_id is not None:
        payload["user_id"] = user_id
    return client.post(f"/api/v1/groups/{group_id}/members", json=payload)


def make_expense(
    client,
    group_id: str,
    paid_by: str,
    amount: str,
    member_ids: list[str] | None = None,
    description: str = "Test Expense",
    date: str | None = None,
):
    """
    Creates a shared expense and returns the HTTP response.
    member_ids=None splits between every current member.
    """
    payload: dict = {
        "paid_by": paid_by,
        "description": description,
        "amount": amount,
    }
    if member_ids is not None:
        payload["member_ids"] = member_ids
    if date is not None:
        payload["date"] = date

    return client.post(f"/api/v1/groups/{group_id}/expenses", json=payload)


def make_category(client, user_id: str, name: str, color: str = "#123456"):
    return client.post(
        f"/api/v1/users/{user_id}/categories",
        json={"name": name, "color": color},
    )


def list_categories(client, user_id: str) -> list[dict]:
    resp = client.get(f"/api/v1/users/{user_id}/categories")
    assert resp.status_code == 200, f"list_categories failed: {resp.get_json()}"
    return resp.get_json()["data"]


def category_id_by_name(client, user_id: str, name: str) -> str:
    return next(c["id"] for c in list_categories(client, user_id) if c["name"] == name)


def make_personal_expense(
    client,
    user_id: str,
    category_id: str,
    amount: str,
    date: str | None = None,
    description: str = "Coffee",
):
    payload: dict = {
        "amount": amount,
        "description": description,
        "category_id": category_id,
    }
    if date is not None:
        payload["date"] = date
    return client.post(f"/api/v1/users/{user_id}/expenses", json=payload)
