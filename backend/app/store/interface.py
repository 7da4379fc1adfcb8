"""
store/interface.py — Abstract record store.

The record store is the only persistence seam in the application. Services
receive a RecordStore instance as an argument and never touch a database
session, so the same service code runs against:

  - SqlRecordStore       (store/sql_store.py)     — SQLAlchemy session, used by routes
  - InMemoryRecordStore  (store/memory_store.py)  — plain dicts, used by unit tests

Records are the ORM model instances themselves. SQLAlchemy models can be
constructed and mutated without a session, which is what lets the in-memory
store hold them directly.

The interface is deliberately thin: get / save / list / delete per entity,
no computation. save_*() is an upsert: it registers a new record or persists
changes made to one already returned by the store.
"""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod

from backend.app.models.category import Category
from backend.app.models.group import Group
from backend.app.models.member import GroupMember  # noqa: F401  (mapper registration)
from backend.app.models.personal_expense import PersonalExpense
from backend.app.models.shared_expense import SharedExpense
from backend.app.models.split import Split  # noqa: F401  (mapper registration)
from backend.app.models.user import User


def new_id(prefix: str) -> str:
    """Returns a synthetic record id such as "group-9f1c2e…"."""
    return f"{prefix}-{uuid.uuid4().hex}"


class RecordStore(ABC):

    # ── Users ──────────────────────────────────────────────────────────────

    @abstractmethod
    def get_user(self, user_id: str) -> User | None:
        """Returns the user or None."""

    @abstractmethod
    def find_user_by_email(self, email: str) -> User | None:
        """Exact match on the stored (lower-cased) email."""

    @abstractmethod
    def save_user(self, user: User) -> User:
        """Inserts or updates a user."""

    # ── Groups ─────────────────────────────────────────────────────────────

    @abstractmethod
    def get_group(self, group_id: str) -> Group | None:
        """Returns the group with its members, or None."""

    @abstractmethod
    def list_groups_for_user(self, user_id: str) -> list[Group]:
        """Groups in which user_id is a current member. Order unspecified."""

    @abstractmethod
    def save_group(self, group: Group) -> Group:
        """Inserts or updates a group, including its embedded members."""

    @abstractmethod
    def delete_group(self, group_id: str) -> None:
        """
        Deletes a group AND every shared expense that references it.

        Shared expenses are stored independently of their group, so the
        cascade is performed here explicitly. No-op for unknown ids.
        """

    # ── Shared expenses ────────────────────────────────────────────────────

    @abstractmethod
    def get_shared_expense(self, expense_id: str) -> SharedExpense | None:
        """Returns the expense with its splits, or None."""

    @abstractmethod
    def list_shared_expenses(self, group_id: str) -> list[SharedExpense]:
        """All expenses (settled or not) for a group. Order unspecified."""

    @abstractmethod
    def save_shared_expense(self, expense: SharedExpense) -> SharedExpense:
        """Inserts or updates an expense, including its splits."""

    @abstractmethod
    def delete_shared_expense(self, expense_id: str) -> None:
        """Deletes an expense and its splits. No-op for unknown ids."""

    # ── Categories ─────────────────────────────────────────────────────────

    @abstractmethod
    def get_category(self, category_id: str) -> Category | None:
        """Returns the category or None."""

    @abstractmethod
    def list_categories(self, user_id: str) -> list[Category]:
        """Categories owned by user_id, ordered by name (case-insensitive)."""

    @abstractmethod
    def save_category(self, category: Category) -> Category:
        """Inserts or updates a category."""

    @abstractmethod
    def delete_category(self, category_id: str) -> None:
        """Deletes a category. No-op for unknown ids."""

    # ── Personal expenses ──────────────────────────────────────────────────

    @abstractmethod
    def get_personal_expense(self, expense_id: str) -> PersonalExpense | None:
        """Returns the personal expense or None."""

    @abstractmethod
    def list_personal_expenses(self, user_id: str) -> list[PersonalExpense]:
        """Personal expenses owned by user_id. Order unspecified."""

    @abstractmethod
    def save_personal_expense(self, expense: PersonalExpense) -> PersonalExpense:
        """Inserts or updates a personal expense."""

    @abstractmethod
    def delete_personal_expense(self, expense_id: str) -> None:
        """Deletes a personal expense. No-op for unknown ids."""

    # ── Unit of work ───────────────────────────────────────────────────────

    @abstractmethod
    def commit(self) -> None:
        """
        Makes all pending writes durable.

        Services never call this; routes commit once per request after the
        service returns (same rule as db.session.commit()).
        """
