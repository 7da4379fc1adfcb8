"""
models/split.py — Split table definition.

No business logic. No imports from services or routes.

Key design points:
  - `amount` uses Numeric(14, 4) — never Float. Equal shares such as
    100 / 3 are kept to four places; the balance engine re-derives the
    share from the parent amount anyway.
  - expense_id is ON DELETE CASCADE — splits are owned by their expense.
  - UNIQUE(expense_id, user_id) prevents the same user appearing twice in
    one expense's splits.
"""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import Boolean, ForeignKey, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.app.extensions import db


class Split(db.Model):
    __tablename__ = "splits"

    __table_args__ = (
        UniqueConstraint("expense_id", "user_id", name="uq_splits_expense_user"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    expense_id: Mapped[str] = mapped_column(
        ForeignKey("shared_expenses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    user_id: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
    )

    amount: Mapped[Decimal] = mapped_column(
        Numeric(14, 4),
        nullable=False,
    )

    # Mirrors the parent expense's flag; never toggled on its own.
    settled: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
    )

    expense: Mapped["SharedExpense"] = relationship(  # noqa: F821
        "SharedExpense",
        back_populates="splits",
    )

    def __repr__(self) -> str:  # pragma: no cover
        return (
            f"<Split expense_id={self.expense_id!r} "
            f"user_id={self.user_id!r} "
            f"amount={self.amount}>"
        )
