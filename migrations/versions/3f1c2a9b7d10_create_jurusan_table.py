"""Create the jurusan table.

One row per academic department.  ``deleted_at`` is the soft-delete
tombstone; ``status`` mirrors it ('Tidak Aktif' rows are tombstoned).

Revision ID: 3f1c2a9b7d10
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa


revision = "3f1c2a9b7d10"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create jurusan with its status check and tombstone index."""
    op.create_table(
        "jurusan",
        sa.Column("id", sa.String(length=20), nullable=False),
        sa.Column("department_name", sa.String(length=100), nullable=False),
        sa.Column("abbreviation", sa.String(length=20), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.CheckConstraint(
            "status IN ('Aktif', 'Tidak Aktif')", name="ck_jurusan_status"
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("department_name"),
    )
    with op.batch_alter_table("jurusan") as batch_op:
        batch_op.create_index(
            batch_op.f("ix_jurusan_deleted_at"), ["deleted_at"], unique=False
        )


def downgrade() -> None:
    """Drop the jurusan table."""
    with op.batch_alter_table("jurusan") as batch_op:
        batch_op.drop_index(batch_op.f("ix_jurusan_deleted_at"))
    op.drop_table("jurusan")
