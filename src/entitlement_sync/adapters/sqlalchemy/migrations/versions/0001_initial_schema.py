"""Initial entitlement schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19 00:00:00

"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "0001"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "sku",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("label", sa.String(), nullable=False),
        sa.Column("external_id", sa.BigInteger(), nullable=True),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_sku")),
        sa.UniqueConstraint("external_id", name=op.f("uq_sku_external_id")),
    )
    op.create_table(
        "entitlement",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("guild_id", sa.BigInteger(), nullable=True),
        sa.Column("user_id", sa.BigInteger(), nullable=True),
        sa.Column("sku_id", sa.Uuid(), nullable=False),
        sa.Column("source", sa.String(length=16), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(
            ["sku_id"], ["sku.id"], name=op.f("fk_entitlement_sku_id_sku")
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_entitlement")),
    )
    op.create_index(
        "ix_entitlement_natural_key",
        "entitlement",
        ["guild_id", "user_id", "sku_id", "source"],
    )
    op.create_table(
        "discord_entitlement",
        sa.Column("discord_id", sa.BigInteger(), autoincrement=False, nullable=False),
        sa.Column("entitlement_id", sa.Uuid(), nullable=False),
        sa.ForeignKeyConstraint(
            ["entitlement_id"],
            ["entitlement.id"],
            name=op.f("fk_discord_entitlement_entitlement_id_entitlement"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("discord_id", name=op.f("pk_discord_entitlement")),
    )
    op.create_index(
        "ix_discord_entitlement_entitlement_id",
        "discord_entitlement",
        ["entitlement_id"],
    )


def downgrade() -> None:
    op.drop_index("ix_discord_entitlement_entitlement_id", table_name="discord_entitlement")
    op.drop_table("discord_entitlement")
    op.drop_index("ix_entitlement_natural_key", table_name="entitlement")
    op.drop_table("entitlement")
    op.drop_table("sku")
