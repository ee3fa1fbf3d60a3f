"""Create the key-value table for the timetable and provisioned subjects.

Revision ID: 3a8e51c0d2b7
Revises:
Create Date: 2026-10-12
"""

from alembic import op
import sqlalchemy as sa


def _table_exists(conn, name: str) -> bool:
    inspector = sa.inspect(conn)
    return name in inspector.get_table_names()


# revision identifiers, used by Alembic.
revision = "3a8e51c0d2b7"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    conn = op.get_bind()
    if not _table_exists(conn, "kv_store"):
        op.create_table(
            "kv_store",
            sa.Column("key", sa.Text(), primary_key=True),
            sa.Column("value", sa.Text(), nullable=False),
            sa.Column("updated_at", sa.Text(), nullable=False),
        )


def downgrade():
    conn = op.get_bind()
    if _table_exists(conn, "kv_store"):
        op.drop_table("kv_store")
