import uuid
from datetime import date, datetime
from enum import Enum

from sqlalchemy import Boolean, Date, DateTime, Enum as SAEnum, Integer, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.db.base import Base


class RecurrencePattern(str, Enum):
    daily = "daily"
    weekly = "weekly"
    custom = "custom"


class ScheduleTemplate(Base):
    __tablename__ = "schedule_templates"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    subject: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    class_name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    section: Mapped[str | None] = mapped_column(String(50), nullable=True)
    instructor_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    instructor_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    room: Mapped[str | None] = mapped_column(String(100), nullable=True)
    meeting_link: Mapped[str | None] = mapped_column(String(500), nullable=True)
    is_online: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    recurrence_pattern: Mapped[RecurrencePattern] = mapped_column(
        SAEnum(RecurrencePattern, name="recurrence_pattern"),
        nullable=False,
    )
    # 0 = Sunday ... 6 = Saturday
    recurrence_days: Mapped[list[int]] = mapped_column(JSON, nullable=False, default=list)
    start_time: Mapped[str] = mapped_column(String(5), nullable=False)
    end_time: Mapped[str] = mapped_column(String(5), nullable=False)
    duration: Mapped[int] = mapped_column(Integer, nullable=False)
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    number_of_weeks: Mapped[int | None] = mapped_column(Integer, nullable=True)
    generated_session_ids: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    last_applied: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_by: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())
