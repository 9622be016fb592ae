"""Initial database schema.

Revision ID: 001_initial
Revises: None
Create Date: 2025-05-12

Creates the bookings table. On PostgreSQL it also adds the
bookings_no_overlap exclusion constraint, which rejects two non-cancelled
bookings whose inclusive stay ranges share a day.
"""

from typing import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers
revision: str = "001_initial"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create the bookings table and its constraints."""
    op.create_table(
        "bookings",
        sa.Column("id", sa.Uuid(), primary_key=True),
        # Guest
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("phone", sa.String(20), nullable=False),
        sa.Column("email", sa.String(255), nullable=False, index=True),
        sa.Column("country", sa.String(100), nullable=False),
        sa.Column("city", sa.String(100), nullable=False),
        sa.Column("address", sa.String(255), nullable=False),
        # Stay
        sa.Column("check_in_date", sa.Date, nullable=False, index=True),
        sa.Column("check_out_date", sa.Date, nullable=False, index=True),
        sa.Column("arrival", sa.Time, nullable=False),
        sa.Column("booking_type", sa.String(50), nullable=False),
        # Status & price
        sa.Column("status", sa.String(20), nullable=False, server_default="Pending", index=True),
        sa.Column("total_price", sa.Numeric(10, 2), nullable=False, server_default="0"),
        # Timestamps
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("check_out_date >= check_in_date", name="check_stay_order"),
        sa.CheckConstraint(
            "status IN ('Pending', 'Confirmed', 'Cancelled')", name="check_booking_status"
        ),
        sa.CheckConstraint("total_price >= 0", name="check_total_price"),
    )

    if op.get_bind().dialect.name == "postgresql":
        op.execute("CREATE EXTENSION IF NOT EXISTS btree_gist")
        op.execute(
            """
            ALTER TABLE bookings
              ADD CONSTRAINT bookings_no_overlap
              EXCLUDE USING gist (
                daterange(check_in_date, check_out_date, '[]') WITH &&
              )
              WHERE (status <> 'Cancelled')
            """
        )


def downgrade() -> None:
    """Drop the bookings table."""
    if op.get_bind().dialect.name == "postgresql":
        op.execute("ALTER TABLE bookings DROP CONSTRAINT IF EXISTS bookings_no_overlap")
    op.drop_table("bookings")
