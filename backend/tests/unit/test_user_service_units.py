"""
Unit tests for user_service registration and lookup.
"""

from __future__ import annotations

import pytest

from backend.app.errors import AppError, ErrorCode
from backend.app.services import user_service


def test_register_lowercases_email_and_strips_name(store):
    user = user_service.register_user({"name": "  Alice ", "email": "Alice@Example.COM"}, store)

    assert user["name"] == "Alice"
    assert user["email"] == "alice@example.com"
    assert user["id"].startswith("user-")
    assert store.get_user(user["id"]).email == "alice@example.com"


def test_register_duplicate_email(store):
    user_service.register_user({"name": "Alice", "email": "alice@example.com"}, store)

    with pytest.raises(AppError) as exc_info:
        user_service.register_user({"name": "Other", "email": "ALICE@example.com"}, store)

    assert exc_info.value.code == ErrorCode.DUPLICATE_EMAIL
    assert exc_info.value.http_status == 409
    assert exc_info.value.field == "email"


def test_find_by_email_is_case_insensitive(store):
    user = user_service.register_user({"name": "Alice", "email": "alice@example.com"}, store)

    assert user_service.find_user_by_email(" Alice@Example.com ", store) == user


def test_unknown_user(store):
    with pytest.raises(AppError) as exc_info:
        user_service.get_user("user-missing", store)

    assert exc_info.value.code == ErrorCode.USER_NOT_FOUND

    with pytest.raises(AppError):
        user_service.find_user_by_email("nobody@example.com", store)
