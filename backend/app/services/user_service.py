"""
services/user_service.py — User registration and lookup.

Users carry no credentials. Emails are normalised to lower case before they
are stored or searched, so uniqueness is case-insensitive.

Layer rules:
  - No Flask imports.
  - Commits are the route's responsibility.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from backend.app.errors import AppError, ErrorCode
from backend.app.models.user import User
from backend.app.store.interface import RecordStore, new_id

logger = logging.getLogger(__name__)


def _build_user_dict(user: User) -> dict:
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "created_at": user.created_at.isoformat(),
    }


def get_user_or_404(user_id: str, store: RecordStore) -> User:
    """Returns the User or raises USER_NOT_FOUND (404)."""
    user = store.get_user(user_id)
    if user is None:
        raise AppError(
            ErrorCode.USER_NOT_FOUND,
            f"User {user_id} does not exist.",
            404,
        )
    return user


def register_user(data: dict, store: RecordStore) -> dict:
    """
    Creates a user from a validated RegisterUserSchema payload.

    Raises:
      AppError(DUPLICATE_EMAIL, 409) — email already registered
    """
    email = data["email"].strip().lower()

    if store.find_user_by_email(email) is not None:
        raise AppError(
            ErrorCode.DUPLICATE_EMAIL,
            "An account with this email already exists.",
            409,
            field="email",
        )

    user = User(
        id=new_id("user"),
        name=data["name"].strip(),
        email=email,
        created_at=datetime.now(timezone.utc),
    )
    store.save_user(user)

    logger.info("User %s registered.", user.id)
    return _build_user_dict(user)


def get_user(user_id: str, store: RecordStore) -> dict:
    return _build_user_dict(get_user_or_404(user_id, store))


def find_user_by_email(email: str, store: RecordStore) -> dict:
    """
    Looks a user up by email (case-insensitive).

    Raises:
      AppError(USER_NOT_FOUND, 404) — no user with that email
    """
    user = store.find_user_by_email(email.strip().lower())
    if user is None:
        raise AppError(
            ErrorCode.USER_NOT_FOUND,
            f"No user is registered with email {email}.",
            404,
        )
    return _build_user_dict(user)
