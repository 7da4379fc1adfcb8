"""
store/memory_store.py — RecordStore backed by plain dicts.

Holds transient ORM instances keyed by id. Used by the unit tests to run the
service layer without a database or Flask app, and usable as a scratch
store for scripts.
"""

from __future__ import annotations

from backend.app.models.category import Category
from backend.app.models.group import Group
from backend.app.models.personal_expense import PersonalExpense
from backend.app.models.shared_expense import SharedExpense
from backend.app.models.user import User
from backend.app.store.interface import RecordStore


class InMemoryRecordStore(RecordStore):

    def __init__(self) -> None:
        self.users: dict[str, User] = {}
        self.groups: dict[str, Group] = {}
        self.shared_expenses: dict[str, SharedExpense] = {}
        self.categories: dict[str, Category] = {}
        self.personal_expenses: dict[str, PersonalExpense] = {}
        self.commits = 0

    # ── Users ──────────────────────────────────────────────────────────────

    def get_user(self, user_id: str) -> User | None:
        return self.users.get(user_id)

    def find_user_by_email(self, email: str) -> User | None:
        return next((u for u in self.users.values() if u.email == email), None)

    def save_user(self, user: User) -> User:
        self.users[user.id] = user
        return user

    # ── Groups ─────────────────────────────────────────────────────────────

    def get_group(self, group_id: str) -> Group | None:
        return self.groups.get(group_id)

    def list_groups_for_user(self, user_id: str) -> list[Group]:
        return [g for g in self.groups.values() if g.find_member(user_id) is not None]

    def save_group(self, group: Group) -> Group:
        self.groups[group.id] = group
        return group

    def delete_group(self, group_id: str) -> None:
        for expense in self.list_shared_expenses(group_id):
            del self.shared_expenses[expense.id]
        self.groups.pop(group_id, None)

    # ── Shared expenses ────────────────────────────────────────────────────

    def get_shared_expense(self, expense_id: str) -> SharedExpense | None:
        return self.shared_expenses.get(expense_id)

    def list_shared_expenses(self, group_id: str) -> list[SharedExpense]:
        return [e for e in self.shared_expenses.values() if e.group_id == group_id]

    def save_shared_expense(self, expense: SharedExpense) -> SharedExpense:
        self.shared_expenses[expense.id] = expense
        return expense

    def delete_shared_expense(self, expense_id: str) -> None:
        self.shared_expenses.pop(expense_id, None)

    # ── Categories ─────────────────────────────────────────────────────────

    def get_category(self, category_id: str) -> Category | None:
        return self.categories.get(category_id)

    def list_categories(self, user_id: str) -> list[Category]:
        owned = [c for c in self.categories.values() if c.user_id == user_id]
        return sorted(owned, key=lambda c: c.name.lower())

    def save_category(self, category: Category) -> Category:
        self.categories[category.id] = category
        return category

    def delete_category(self, category_id: str) -> None:
        self.categories.pop(category_id, None)

    # ── Personal expenses ──────────────────────────────────────────────────

    def get_personal_expense(self, expense_id: str) -> PersonalExpense | None:
        return self.personal_expenses.get(expense_id)

    def list_personal_expenses(self, user_id: str) -> list[PersonalExpense]:
        return [e for e in self.personal_expenses.values() if e.user_id == user_id]

    def save_personal_expense(self, expense: PersonalExpense) -> PersonalExpense:
        self.personal_expenses[expense.id] = expense
        return expense

    def delete_personal_expense(self, expense_id: str) -> None:
        self.personal_expenses.pop(expense_id, None)

    # ── Unit of work ───────────────────────────────────────────────────────

    def commit(self) -> None:
        self.commits += 1
