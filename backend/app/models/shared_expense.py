"""
models/shared_expense.py — SharedExpense table definition.

No business logic. No imports from services or routes.

Key design points:
  - `amount` uses Numeric(12, 2) — never Float.
  - group_id is ON DELETE RESTRICT: a group's expenses are deleted explicitly
    before the group itself (record store delete_group()).
  - paid_by is a plain string id; it is validated against the participants
    when the expense is created, not by a foreign key.
  - `settled` is set in bulk together with every split's `settled` flag.
"""

from __future__ import annotations

import datetime as dt
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    ForeignKey,
    Numeric,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.app.extensions import db
from backend.app.models.types import UTCDateTime


class SharedExpense(db.Model):
    __tablename__ = "shared_expenses"

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_shared_expenses_amount_positive"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True)

    group_id: Mapped[str] = mapped_column(
        ForeignKey("groups.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
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

    paid_by: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
    )

    settled: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
    )

    created_at: Mapped[dt.datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
    )

    updated_at: Mapped[dt.datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
    )

    # Splits are owned by their expense; the ORM deletes them with it.
    splits: Mapped[list["Split"]] = relationship(  # noqa: F821
        "Split",
        back_populates="expense",
        cascade="all, delete-orphan",
        order_by="Split.id",
    )

    def __repr__(self) -> str:  # pragma: no cover
        return (
            f"<SharedExpense id={self.id!r} "
            f"group_id={self.group_id!r} "
            f"amount={self.amount} "
            f"settled={self.settled}>"
        )
