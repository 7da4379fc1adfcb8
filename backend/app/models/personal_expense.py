"""
models/personal_expense.py — PersonalExpense table definition.

No business logic. No imports from services or routes.

category_id is ON DELETE RESTRICT: deleting a category first reassigns its
expenses (category_service.delete_category()).
"""

from __future__ import annotations

import datetime as dt
from decimal import Decimal

from sqlalchemy import (
    CheckConstraint,
    Date,
    ForeignKey,
    Numeric,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.app.extensions import db
from backend.app.models.types import UTCDateTime


class PersonalExpense(db.Model):
    __tablename__ = "personal_expenses"

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_personal_expenses_amount_positive"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True)

    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    category_id: Mapped[str] = mapped_column(
        ForeignKey("categories.id", ondelete="RESTRICT"),
        nullable=False,
    )

    amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
    )

    description: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    date: Mapped[dt.date] = mapped_column(
        Date,
        nullable=False,
    )

    created_at: Mapped[dt.datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
    )

    updated_at: Mapped[dt.datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
    )

    user: Mapped["User"] = relationship(  # noqa: F821
        "User",
        back_populates="personal_expenses",
    )

    def __repr__(self) -> str:  # pragma: no cover
        return (
            f"<PersonalExpense id={self.id!r} "
            f"user_id={self.user_id!r} "
            f"amount={self.amount}>"
        )
