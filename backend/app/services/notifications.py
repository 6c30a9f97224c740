from __future__ import annotations

from datetime import date
import logging
from typing import Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import NotificationDeliveryError
from app.models.class_session import ClassSession
from app.models.notification import Notification, SessionEventKind

logger = logging.getLogger(__name__)


class NotificationPort(Protocol):
    def notify_session_event(
        self, session: ClassSession, event: SessionEventKind, *, actor_id: str | None = None
    ) -> None: ...


def _format_date(value: date | None) -> str:
    if value is None:
        return "an earlier date"
    return value.strftime("%a, %d %b %Y")


def build_session_message(session: ClassSession, event: SessionEventKind) -> tuple[str, str]:
    if event == SessionEventKind.created:
        return (
            f"New Class Scheduled: {session.subject}",
            f"A new {session.subject} class has been scheduled for {_format_date(session.date)} "
            f"at {session.start_time}.",
        )
    if event == SessionEventKind.cancelled:
        reason = f" Reason: {session.cancel_reason}" if session.cancel_reason else ""
        return (
            f"Class Cancelled: {session.subject}",
            f"The {session.subject} class scheduled for {_format_date(session.date)} has been cancelled.{reason}",
        )
    if event == SessionEventKind.rescheduled:
        return (
            f"Class Rescheduled: {session.subject}",
            f"The {session.subject} class has been rescheduled from {_format_date(session.rescheduled_from)} "
            f"to {_format_date(session.date)} at {session.start_time}.",
        )
    if event == SessionEventKind.materials_added:
        return (
            f"New Materials: {session.subject}",
            f"New study materials have been added for your {session.subject} class.",
        )
    raise ValueError(f"Unknown session event: {event}")


class RecordingNotifier:
    """Stores one notification per event, addressed to the session's cohort.

    Delivery (push, SMS, sockets) happens elsewhere. The record is committed
    on its own so a failure here cannot undo the session change that caused it.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def notify_session_event(
        self, session: ClassSession, event: SessionEventKind, *, actor_id: str | None = None
    ) -> None:
        title, message = build_session_message(session, event)
        record = Notification(
            recipient_class=session.class_name,
            recipient_section=session.section,
            session_id=session.id,
            event=event,
            title=title,
            message=message,
            created_by=actor_id,
        )
        try:
            self.db.add(record)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise NotificationDeliveryError(f"Could not record {event.value} notification") from exc


class NullNotifier:
    def notify_session_event(
        self, session: ClassSession, event: SessionEventKind, *, actor_id: str | None = None
    ) -> None:
        logger.debug("Notifications disabled; dropping %s for session %s", event.value, session.id)


def dispatch_session_event(
    notifier: NotificationPort,
    session: ClassSession,
    event: SessionEventKind,
    *,
    actor_id: str | None = None,
) -> bool:
    try:
        notifier.notify_session_event(session, event, actor_id=actor_id)
    except Exception:
        logger.warning("Failed to send %s notification for session %s", event.value, session.id, exc_info=True)
        return False
    return True
