"""
tests/unit/conftest.py — Shared fixtures for service-level unit tests.

Unit tests run the service layer against InMemoryRecordStore: no database,
no Flask application context. Records are transient ORM instances.
"""

from __future__ import annotations

import pytest

from backend.app.services import category_service, group_service, user_service
from backend.app.store.memory_store import InMemoryRecordStore


@pytest.fixture
def store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


def make_user(store, name: str = "Alice") -> str:
    """Registers a user and returns their id."""
    user = user_service.register_user(
        {"name": name, "email": f"{name.lower()}@test.com"},
        store,
    )
    return user["id"]


def make_group(store, created_by: str, *other_names: str) -> tuple[str, list[str]]:
    """
    Creates a group owned by created_by plus one name-only member per name.

    Returns (group_id, [created_by, *generated member ids]).
    """
    group = group_service.create_group({"name": "Trip", "created_by": created_by}, store)
    member_ids = [created_by]
    for name in other_names:
        member = group_service.add_member(group["id"], {"display_name": name}, store)
        member_ids.append(member["user_id"])
    return group["id"], member_ids


def category_id(store, user_id: str, name: str) -> str:
    categories = category_service.list_categories(user_id, store)
    return next(c.id for c in categories if c.name == name)
