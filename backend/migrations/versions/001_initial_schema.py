"""Initial schema — all tables, constraints, and indexes.

Revision: 001_initial_schema
Created:  2026-10-19

Creates the complete ExpenseLedger v1 schema, mirroring the models in
backend/app/models/.

Append-only:
  This file must NEVER be edited after it has been applied to any database.
  If a schema change is required, create a NEW migration file.

Creation order (FK dependency):
  users → categories → personal_expenses
  groups → group_members, shared_expenses → splits

ON DELETE policies:
  categories.user_id             → CASCADE   (categories owned by user)
  personal_expenses.user_id      → CASCADE   (expenses owned by user)
  personal_expenses.category_id  → RESTRICT  (reassign before deleting a category)
  group_members.group_id         → CASCADE   (members embedded in group)
  shared_expenses.group_id       → RESTRICT  (expenses deleted explicitly first)
  splits.expense_id              → CASCADE   (splits owned by expense)

Member, payer and split user ids are plain strings without foreign keys:
members may be added by name only, and removed members stay referenced by
historical expenses.
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

# ── Alembic revision identifiers ──────────────────────────────────────────
revision: str = "001_initial_schema"
down_revision: str | None = None      # first migration
branch_labels: tuple | None = None
depends_on: tuple | None = None


def upgrade() -> None:

    # ── users ──────────────────────────────────────────────────────────────
    op.create_table(
        "users",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("email", name="uq_users_email"),
        sa.CheckConstraint("LENGTH(TRIM(name)) > 0", name="ck_users_name_nonempty"),
        sa.CheckConstraint("email LIKE '%@%'", name="ck_users_email_format"),
    )

    # ── categories ─────────────────────────────────────────────────────────
    op.create_table(
        "categories",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column(
            "user_id",
            sa.String(64),
            sa.ForeignKey("users.id", ondelete="CASCADE", name="fk_categories_user"),
            nullable=False,
        ),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("color", sa.String(7), nullable=False),
        sa.Column("icon", sa.String(50), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_categories"),
        sa.CheckConstraint("LENGTH(TRIM(name)) > 0", name="ck_categories_name_nonempty"),
    )
    op.create_index("idx_categories_user", "categories", ["user_id"])

    # ── personal_expenses ──────────────────────────────────────────────────
    op.create_table(
        "personal_expenses",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column(
            "user_id",
            sa.String(64),
            sa.ForeignKey("users.id", ondelete="CASCADE", name="fk_personal_expenses_user"),
            nullable=False,
        ),
        sa.Column(
            "category_id",
            sa.String(64),
            sa.ForeignKey("categories.id", ondelete="RESTRICT", name="fk_personal_expenses_category"),
            nullable=False,
        ),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("description", sa.String(255), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_personal_expenses"),
        sa.CheckConstraint("amount > 0", name="ck_personal_expenses_amount_positive"),
    )
    op.create_index("idx_personal_expenses_user", "personal_expenses", ["user_id"])

    # ── groups ─────────────────────────────────────────────────────────────
    op.create_table(
        "groups",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_by", sa.String(64), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_groups"),
        sa.CheckConstraint("LENGTH(TRIM(name)) > 0", name="ck_groups_name_nonempty"),
    )

    # ── group_members ──────────────────────────────────────────────────────
    op.create_table(
        "group_members",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column(
            "group_id",
            sa.String(64),
            sa.ForeignKey("groups.id", ondelete="CASCADE", name="fk_group_members_group"),
            nullable=False,
        ),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("display_name", sa.String(100), nullable=False),
        sa.Column("joined_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_group_members"),
        sa.UniqueConstraint("group_id", "user_id", name="uq_group_members_group_user"),
    )
    op.create_index("idx_group_members_group", "group_members", ["group_id"])

    # ── shared_expenses ────────────────────────────────────────────────────
    op.create_table(
        "shared_expenses",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column(
            "group_id",
            sa.String(64),
            sa.ForeignKey("groups.id", ondelete="RESTRICT", name="fk_shared_expenses_group"),
            nullable=False,
        ),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("description", sa.String(255), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("paid_by", sa.String(64), nullable=False),
        sa.Column("settled", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_shared_expenses"),
        sa.CheckConstraint("amount > 0", name="ck_shared_expenses_amount_positive"),
    )
    op.create_index("idx_shared_expenses_group", "shared_expenses", ["group_id"])

    # ── splits ─────────────────────────────────────────────────────────────
    # amount carries 4 dp: equal shares are not rounded to cents.
    op.create_table(
        "splits",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column(
            "expense_id",
            sa.String(64),
            sa.ForeignKey("shared_expenses.id", ondelete="CASCADE", name="fk_splits_expense"),
            nullable=False,
        ),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("amount", sa.Numeric(14, 4), nullable=False),
        sa.Column("settled", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.PrimaryKeyConstraint("id", name="pk_splits"),
        sa.UniqueConstraint("expense_id", "user_id", name="uq_splits_expense_user"),
    )
    op.create_index("idx_splits_expense", "splits", ["expense_id"])


def downgrade() -> None:
    """Drops everything in reverse dependency order."""
    op.drop_index("idx_splits_expense", table_name="splits")
    op.drop_table("splits")
    op.drop_index("idx_shared_expenses_group", table_name="shared_expenses")
    op.drop_table("shared_expenses")
    op.drop_index("idx_group_members_group", table_name="group_members")
    op.drop_table("group_members")
    op.drop_table("groups")
    op.drop_index("idx_personal_expenses_user", table_name="personal_expenses")
    op.drop_table("personal_expenses")
    op.drop_index("idx_categories_user", table_name="categories")
    op.drop_table("categories")
    op.drop_table("users")
