"""create hotfixes and kv_cache tables

Revision ID: 0001
Revises:
Create Date: 2026-10-19 00:00:00

"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

from hotfixmirror.adapters.sqlalchemy.mappings import UTCDateTime

revision: str = "0001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "hotfixes",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("unique_filename", sa.String(), nullable=False),
        sa.Column("filename", sa.String(), nullable=False),
        sa.Column("hash", sa.String(), nullable=False),
        sa.Column("hash256", sa.String(), nullable=False),
        sa.Column("length", sa.Integer(), nullable=False),
        sa.Column("contents", sa.Text(), nullable=False),
        sa.Column("version", sa.String(), nullable=True),
        sa.Column("scraped_at", UTCDateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_hotfixes")),
    )
    op.create_index("ix_hotfixes_hash256", "hotfixes", ["hash256"], unique=False)
    op.create_index("ix_hotfixes_unique_filename", "hotfixes", ["unique_filename"], unique=False)
    op.create_index("ix_hotfixes_filename", "hotfixes", ["filename"], unique=False)
    op.create_index("ix_hotfixes_version", "hotfixes", ["version"], unique=False)
    op.create_index("ix_hotfixes_scraped_at", "hotfixes", ["scraped_at"], unique=False)

    op.create_table(
        "kv_cache",
        sa.Column("key", sa.String(), nullable=False),
        sa.Column("value", sa.Text(), nullable=False),
        sa.Column("expires_at", sa.Float(), nullable=False),
        sa.PrimaryKeyConstraint("key", name=op.f("pk_kv_cache")),
    )


def downgrade() -> None:
    op.drop_table("kv_cache")
    op.drop_index("ix_hotfixes_scraped_at", table_name="hotfixes")
    op.drop_index("ix_hotfixes_version", table_name="hotfixes")
    op.drop_index("ix_hotfixes_filename", table_name="hotfixes")
    op.drop_index("ix_hotfixes_unique_filename", table_name="hotfixes")
    op.drop_index("ix_hotfixes_hash256", table_name="hotfixes")
    op.drop_table("hotfixes")
