import uuid
import datetime as dt
from enum import Enum

from sqlalchemy import Boolean, Date, DateTime, Enum as SAEnum, Index, Integer, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.db.base import Base


class SessionStatus(str, Enum):
    scheduled = "scheduled"
    ongoing = "ongoing"
    completed = "completed"
    cancelled = "cancelled"
    rescheduled = "rescheduled"


# Statuses that still occupy an instructor, room and cohort.
ACTIVE_SESSION_STATUSES = (SessionStatus.scheduled, SessionStatus.ongoing, SessionStatus.rescheduled)
TERMINAL_SESSION_STATUSES = (SessionStatus.completed, SessionStatus.cancelled)


def default_notification_flags() -> dict:
    return {"created": False, "reminder24h": False, "reminder1h": False}


class ClassSession(Base):
    __tablename__ = "class_sessions"
    __table_args__ = (
        Index("ix_class_sessions_instructor_date", "instructor_id", "date"),
        Index("ix_class_sessions_room_date", "room", "date"),
        Index("ix_class_sessions_cohort_date", "class_name", "section", "date"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    subject: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    class_name: Mapped[str] = mapped_column(String(100), nullable=False)
    section: Mapped[str | None] = mapped_column(String(50), nullable=True)
    instructor_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    instructor_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    start_time: Mapped[str] = mapped_column(String(5), nullable=False)
    end_time: Mapped[str] = mapped_column(String(5), nullable=False)
    duration: Mapped[int] = mapped_column(Integer, nullable=False)
    room: Mapped[str | None] = mapped_column(String(100), nullable=True)
    meeting_link: Mapped[str | None] = mapped_column(String(500), nullable=True)
    is_online: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[SessionStatus] = mapped_column(
        SAEnum(SessionStatus, name="session_status"),
        nullable=False,
        default=SessionStatus.scheduled,
        index=True,
    )
    cancel_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    rescheduled_from: Mapped[dt.date | None] = mapped_column(Date, nullable=True)
    rescheduled_to: Mapped[dt.date | None] = mapped_column(Date, nullable=True)
    materials: Mapped[list[dict]] = mapped_column(JSON, nullable=False, default=list)
    prerequisites: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    recurrence_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    notifications_sent: Mapped[dict] = mapped_column(JSON, nullable=False, default=default_notification_flags)
    created_by: Mapped[str] = mapped_column(String(36), nullable=False)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[dt.datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())
