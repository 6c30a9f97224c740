"""create schedule templates and notifications

Revision ID: 20261019_0002
Revises: 20261019_0001
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

revision = "20261019_0002"
down_revision = "20261019_0001"
branch_labels = None
depends_on = None


recurrence_pattern = sa.Enum("daily", "weekly", "custom", name="recurrence_pattern")
session_event_kind = sa.Enum("created", "cancelled", "rescheduled", "materials_added", name="session_event_kind")


def upgrade() -> None:
    op.create_table(
        "schedule_templates",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("subject", sa.String(length=200), nullable=False),
        sa.Column("class_name", sa.String(length=100), nullable=False),
        sa.Column("section", sa.String(length=50), nullable=True),
        sa.Column("instructor_id", sa.String(length=36), nullable=True),
        sa.Column("instructor_name", sa.String(length=200), nullable=True),
        sa.Column("room", sa.String(length=100), nullable=True),
        sa.Column("meeting_link", sa.String(length=500), nullable=True),
        sa.Column("is_online", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("capacity", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("recurrence_pattern", recurrence_pattern, nullable=False),
        sa.Column("recurrence_days", sa.JSON(), nullable=False),
        sa.Column("start_time", sa.String(length=5), nullable=False),
        sa.Column("end_time", sa.String(length=5), nullable=False),
        sa.Column("duration", sa.Integer(), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("number_of_weeks", sa.Integer(), nullable=True),
        sa.Column("generated_session_ids", sa.JSON(), nullable=False),
        sa.Column("last_applied", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_by", sa.String(length=36), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_schedule_templates_subject", "schedule_templates", ["subject"], unique=False)
    op.create_index("ix_schedule_templates_class_name", "schedule_templates", ["class_name"], unique=False)
    op.create_index("ix_schedule_templates_created_by", "schedule_templates", ["created_by"], unique=False)

    op.create_table(
        "notifications",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("recipient_class", sa.String(length=100), nullable=False),
        sa.Column("recipient_section", sa.String(length=50), nullable=True),
        sa.Column("session_id", sa.String(length=36), nullable=False),
        sa.Column("event", session_event_kind, nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("created_by", sa.String(length=36), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_notifications_recipient_class", "notifications", ["recipient_class"], unique=False)
    op.create_index("ix_notifications_session_id", "notifications", ["session_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_notifications_session_id", table_name="notifications")
    op.drop_index("ix_notifications_recipient_class", table_name="notifications")
    op.drop_table("notifications")
    op.drop_index("ix_schedule_templates_created_by", table_name="schedule_templates")
    op.drop_index("ix_schedule_templates_class_name", table_name="schedule_templates")
    op.drop_index("ix_schedule_templates_subject", table_name="schedule_templates")
    op.drop_table("schedule_templates")
    session_event_kind.drop(op.get_bind(), checkfirst=True)
    recurrence_pattern.drop(op.get_bind(), checkfirst=True)
