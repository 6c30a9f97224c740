import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, Enum as SAEnum, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.db.base import Base


class SessionEventKind(str, Enum):
    created = "created"
    cancelled = "cancelled"
    rescheduled = "rescheduled"
    materials_added = "materials_added"


class Notification(Base):
    __tablename__ = "notifications"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    recipient_class: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    recipient_section: Mapped[str | None] = mapped_column(String(50), nullable=True)
    session_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    event: Mapped[SessionEventKind] = mapped_column(SAEnum(SessionEventKind, name="session_event_kind"), nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    created_by: Mapped[str | None] = mapped_column(String(36), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
