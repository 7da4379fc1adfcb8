"""
store/sql_store.py — RecordStore backed by a SQLAlchemy session.

Layer rules:
  - No Flask imports. Receives the session in the constructor
    (routes pass db.session via extensions.get_store()).
  - Writes are flushed immediately so ids, defaults and FK ordering are
    resolved before the service continues. commit() is the route's call.
"""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from backend.app.models.category import Category
from backend.app.models.group import Group
from backend.app.models.member import GroupMember
from backend.app.models.personal_expense import PersonalExpense
from backend.app.models.shared_expense import SharedExpense
from backend.app.models.user import User
from backend.app.store.interface import RecordStore


class SqlRecordStore(RecordStore):

    def __init__(self, session: Session) -> None:
        self.session = session

    def _save(self, record):
        self.session.add(record)
        self.session.flush()
        return record

    def _delete(self, model, record_id: str) -> None:
        record = self.session.get(model, record_id)
        if record is not None:
            self.session.delete(record)
            self.session.flush()

    # ── Users ──────────────────────────────────────────────────────────────

    def get_user(self, user_id: str) -> User | None:
        return self.session.get(User, user_id)

    def find_user_by_email(self, email: str) -> User | None:
        stmt = select(User).where(User.email == email)
        return self.session.execute(stmt).scalar_one_or_none()

    def save_user(self, user: User) -> User:
        return self._save(user)

    # ── Groups ─────────────────────────────────────────────────────────────

    def get_group(self, group_id: str) -> Group | None:
        return self.session.get(Group, group_id)

    def list_groups_for_user(self, user_id: str) -> list[Group]:
        stmt = (
            select(Group)
            .join(GroupMember, Group.id == GroupMember.group_id)
            .where(GroupMember.user_id == user_id)
            .options(selectinload(Group.members))
        )
        return list(self.session.execute(stmt).scalars().all())

    def save_group(self, group: Group) -> Group:
        return self._save(group)

    def delete_group(self, group_id: str) -> None:
        # Expenses first: shared_expenses.group_id is ON DELETE RESTRICT.
        for expense in self.list_shared_expenses(group_id):
            self.session.delete(expense)
        self.session.flush()
        self._delete(Group, group_id)

    # ── Shared expenses ────────────────────────────────────────────────────

    def get_shared_expense(self, expense_id: str) -> SharedExpense | None:
        return self.session.get(SharedExpense, expense_id)

    def list_shared_expenses(self, group_id: str) -> list[SharedExpense]:
        stmt = (
            select(SharedExpense)
            .where(SharedExpense.group_id == group_id)
            .options(selectinload(SharedExpense.splits))
        )
        return list(self.session.execute(stmt).scalars().all())

    def save_shared_expense(self, expense: SharedExpense) -> SharedExpense:
        return self._save(expense)

    def delete_shared_expense(self, expense_id: str) -> None:
        self._delete(SharedExpense, expense_id)

    # ── Categories ─────────────────────────────────────────────────────────

    def get_category(self, category_id: str) -> Category | None:
        return self.session.get(Category, category_id)

    def list_categories(self, user_id: str) -> list[Category]:
        stmt = (
            select(Category)
            .where(Category.user_id == user_id)
            .order_by(func.lower(Category.name))
        )
        return list(self.session.execute(stmt).scalars().all())

    def save_category(self, category: Category) -> Category:
        return self._save(category)

    def delete_category(self, category_id: str) -> None:
        self._delete(Category, category_id)

    # ── Personal expenses ──────────────────────────────────────────────────

    def get_personal_expense(self, expense_id: str) -> PersonalExpense | None:
        return self.session.get(PersonalExpense, expense_id)

    def list_personal_expenses(self, user_id: str) -> list[PersonalExpense]:
        stmt = select(PersonalExpense).where(PersonalExpense.user_id == user_id)
        return list(self.session.execute(stmt).scalars().all())

    def save_personal_expense(self, expense: PersonalExpense) -> PersonalExpense:
        return self._save(expense)

    def delete_personal_expense(self, expense_id: str) -> None:
        self._delete(PersonalExpense, expense_id)

    # ── Unit of work ───────────────────────────────────────────────────────

    def commit(self) -> None:
        self.session.commit()
