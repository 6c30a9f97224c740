"""create class sessions and exams

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


session_status = sa.Enum("scheduled", "ongoing", "completed", "cancelled", "rescheduled", name="session_status")
exam_status = sa.Enum("scheduled", "ongoing", "completed", "cancelled", name="exam_status")


def upgrade() -> None:
    op.create_table(
        "class_sessions",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("subject", sa.String(length=200), nullable=False),
        sa.Column("class_name", sa.String(length=100), nullable=False),
        sa.Column("section", sa.String(length=50), nullable=True),
        sa.Column("instructor_id", sa.String(length=36), nullable=True),
        sa.Column("instructor_name", sa.String(length=200), nullable=True),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("start_time", sa.String(length=5), nullable=False),
        sa.Column("end_time", sa.String(length=5), nullable=False),
        sa.Column("duration", sa.Integer(), nullable=False),
        sa.Column("room", sa.String(length=100), nullable=True),
        sa.Column("meeting_link", sa.String(length=500), nullable=True),
        sa.Column("is_online", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("capacity", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("status", session_status, nullable=False, server_default="scheduled"),
        sa.Column("cancel_reason", sa.Text(), nullable=True),
        sa.Column("rescheduled_from", sa.Date(), nullable=True),
        sa.Column("rescheduled_to", sa.Date(), nullable=True),
        sa.Column("materials", sa.JSON(), nullable=False),
        sa.Column("prerequisites", sa.JSON(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("recurrence_id", sa.String(length=36), nullable=True),
        sa.Column("notifications_sent", sa.JSON(), nullable=False),
        sa.Column("created_by", sa.String(length=36), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_class_sessions_subject", "class_sessions", ["subject"], unique=False)
    op.create_index("ix_class_sessions_date", "class_sessions", ["date"], unique=False)
    op.create_index("ix_class_sessions_status", "class_sessions", ["status"], unique=False)
    op.create_index("ix_class_sessions_recurrence_id", "class_sessions", ["recurrence_id"], unique=False)
    op.create_index("ix_class_sessions_instructor_date", "class_sessions", ["instructor_id", "date"], unique=False)
    op.create_index("ix_class_sessions_room_date", "class_sessions", ["room", "date"], unique=False)
    op.create_index(
        "ix_class_sessions_cohort_date", "class_sessions", ["class_name", "section", "date"], unique=False
    )

    op.create_table(
        "exams",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("subject", sa.String(length=200), nullable=True),
        sa.Column("class_name", sa.String(length=100), nullable=False),
        sa.Column("section", sa.String(length=50), nullable=True),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("start_time", sa.String(length=5), nullable=True),
        sa.Column("end_time", sa.String(length=5), nullable=True),
        sa.Column("room", sa.String(length=100), nullable=True),
        sa.Column("status", exam_status, nullable=False, server_default="scheduled"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_exams_date", "exams", ["date"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_exams_date", table_name="exams")
    op.drop_table("exams")
    for name in (
        "ix_class_sessions_cohort_date",
        "ix_class_sessions_room_date",
        "ix_class_sessions_instructor_date",
        "ix_class_sessions_recurrence_id",
        "ix_class_sessions_status",
        "ix_class_sessions_date",
        "ix_class_sessions_subject",
    ):
        op.drop_index(name, table_name="class_sessions")
    op.drop_table("class_sessions")
    exam_status.drop(op.get_bind(), checkfirst=True)
    session_status.drop(op.get_bind(), checkfirst=True)
