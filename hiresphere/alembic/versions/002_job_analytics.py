"""Add job analytics tables

Revision ID: 002_job_analytics
Revises: 001_initial
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "002_job_analytics"
down_revision: Union[str, None] = "001_initial"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _counter(name: str) -> sa.Column:
    return sa.Column(name, sa.Integer(), nullable=False, server_default="0")


def upgrade() -> None:
    op.create_table(
        "job_analytics",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("job_id", sa.Integer(), nullable=False),
        _counter("views"),
        _counter("unique_views"),
        _counter("click_throughs"),
        _counter("applications"),
        _counter("direct"),
        _counter("search"),
        _counter("recommendation"),
        _counter("email"),
        _counter("other"),
        sa.Column("last_updated", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["job_id"], ["jobs.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_job_analytics_id"), "job_analytics", ["id"], unique=False)
    op.create_index(op.f("ix_job_analytics_job_id"), "job_analytics", ["job_id"], unique=True)

    op.create_table(
        "job_analytics_daily",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("job_id", sa.Integer(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        _counter("views"),
        _counter("applications"),
        sa.ForeignKeyConstraint(["job_id"], ["jobs.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("job_id", "date", name="uq_job_analytics_daily_job_date"),
    )
    op.create_index(op.f("ix_job_analytics_daily_id"), "job_analytics_daily", ["id"], unique=False)
    op.create_index(op.f("ix_job_analytics_daily_job_id"), "job_analytics_daily", ["job_id"], unique=False)

    op.create_table(
        "job_analytics_demographics",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("job_id", sa.Integer(), nullable=False),
        sa.Column("kind", sa.String(length=20), nullable=False),
        sa.Column("value", sa.String(length=255), nullable=False),
        _counter("count"),
        sa.ForeignKeyConstraint(["job_id"], ["jobs.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("job_id", "kind", "value", name="uq_job_analytics_demographic"),
    )
    op.create_index(op.f("ix_job_analytics_demographics_id"), "job_analytics_demographics", ["id"], unique=False)
    op.create_index(op.f("ix_job_analytics_demographics_job_id"), "job_analytics_demographics", ["job_id"], unique=False)

    op.create_table(
        "job_analytics_viewers",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("job_id", sa.Integer(), nullable=False),
        sa.Column("viewer_hash", sa.String(length=64), nullable=False),
        sa.Column("first_seen", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["job_id"], ["jobs.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("job_id", "viewer_hash", name="uq_job_analytics_viewer"),
    )
    op.create_index(op.f("ix_job_analytics_viewers_id"), "job_analytics_viewers", ["id"], unique=False)
    op.create_index(op.f("ix_job_analytics_viewers_job_id"), "job_analytics_viewers", ["job_id"], unique=False)


def downgrade() -> None:
    for table in (
        "job_analytics_viewers",
        "job_analytics_demographics",
        "job_analytics_daily",
        "job_analytics",
    ):
        op.drop_index(op.f(f"ix_{table}_job_id"), table_name=table)
        op.drop_index(op.f(f"ix_{table}_id"), table_name=table)
        op.drop_table(table)
