"""
models/member.py — GroupMember table definition.

No business logic. No imports from services or routes.

A member is embedded in its group (ON DELETE CASCADE). user_id is a plain
string, not a foreign key: members may be people added by name only, and
historical expenses keep referring to ids of members that were removed.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.app.extensions import db
from backend.app.models.types import UTCDateTime


class GroupMember(db.Model):
    __tablename__ = "group_members"

    __table_args__ = (
        # A user can only belong to a group once.
        UniqueConstraint("group_id", "user_id", name="uq_group_members_group_user"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    group_id: Mapped[str] = mapped_column(
        ForeignKey("groups.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    user_id: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
    )

    display_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )

    joined_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
    )

    group: Mapped["Group"] = relationship(  # noqa: F821
        "Group",
        back_populates="members",
    )

    def __repr__(self) -> str:  # pragma: no cover
        return (
            f"<GroupMember group_id={self.group_id!r} "
            f"user_id={self.user_id!r}>"
        )
