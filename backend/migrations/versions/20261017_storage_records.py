"""Add storage_records key/value table

Revision ID: 20261017_storage_records
Revises:
Create Date: 2026-10-17
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20261017_storage_records"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "storage_records",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("key", sa.String(255), nullable=False),
        sa.Column("value", sa.Text(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_storage_records_key", "storage_records", ["key"], unique=True)


def downgrade():
    op.drop_index("ix_storage_records_key", table_name="storage_records")
    op.drop_table("storage_records")
