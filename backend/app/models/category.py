"""
models/category.py — Category table definition.

No business logic. No imports from services or routes.

Categories are per-user. Name uniqueness is case-insensitive and is
enforced in category_service, not by a DB constraint (SQLite and PostgreSQL
disagree on case-insensitive unique indexes).
"""

from __future__ import annotations

from sqlalchemy import CheckConstraint, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.app.extensions import db


class Category(db.Model):
    __tablename__ = "categories"

    __table_args__ = (
        CheckConstraint(
            "LENGTH(TRIM(name)) > 0",
            name="ck_categories_name_nonempty",
        ),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True)

    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
    )

    # Hex colour, e.g. "#FF6B6B".
    color: Mapped[str] = mapped_column(
        String(7),
        nullable=False,
    )

    icon: Mapped[str | None] = mapped_column(
        String(50),
        nullable=True,
    )

    user: Mapped["User"] = relationship(  # noqa: F821
        "User",
        back_populates="categories",
    )

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Category id={self.id!r} name={self.name!r}>"
