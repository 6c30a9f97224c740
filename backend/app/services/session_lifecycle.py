from __future__ import annotations

from datetime import datetime, timezone
import logging

from app.core.exceptions import ConflictError, InvalidTransitionError, ResourceNotFoundError
from app.models.class_session import ClassSession, SessionStatus, TERMINAL_SESSION_STATUSES
from app.models.notification import SessionEventKind
from app.repositories.schedule_store import ScheduleStore
from app.schemas.class_session import (
    CancelRequest,
    ClassSessionCreate,
    ClassSessionUpdate,
    MaterialIn,
    RescheduleRequest,
)
from app.schemas.conflict import ConflictProposal, ConflictReport
from app.services.conflict_detector import ConflictDetector
from app.services.intervals import duration_minutes
from app.services.notifications import NotificationPort, dispatch_session_event

logger = logging.getLogger(__name__)

_NON_TERMINAL = frozenset(
    status for status in SessionStatus if status not in TERMINAL_SESSION_STATUSES
)

# Source states from which each operation is legal.
ALLOWED_SOURCE_STATES: dict[str, frozenset[SessionStatus]] = {
    "reschedule": _NON_TERMINAL,
    "cancel": _NON_TERMINAL,
    "start": frozenset({SessionStatus.scheduled, SessionStatus.rescheduled}),
    "complete": _NON_TERMINAL,
    "add materials to": _NON_TERMINAL,
    "change the schedule of": _NON_TERMINAL,
}

SCHEDULE_FIELDS = ("date", "start_time", "end_time", "room", "instructor_id", "class_name", "section")
CLEARABLE_FIELDS = frozenset({"section", "instructor_id", "instructor_name", "room", "meeting_link", "description"})


def ensure_transition(record: ClassSession, operation: str) -> None:
    if record.status not in ALLOWED_SOURCE_STATES[operation]:
        raise InvalidTransitionError(operation, record.status.value)


def conflict_error(report: ConflictReport) -> ConflictError:
    return ConflictError(
        "Schedule conflicts detected",
        details={"conflicts": report.model_dump(by_alias=True, mode="json")},
    )


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SessionLifecycle:
    def __init__(self, store: ScheduleStore, detector: ConflictDetector, notifier: NotificationPort) -> None:
        self.store = store
        self.detector = detector
        self.notifier = notifier

    def get(self, session_id: str) -> ClassSession:
        record = self.store.get_session(session_id)
        if record is None:
            raise ResourceNotFoundError("Session", session_id)
        return record

    def _proposal_for(self, record: ClassSession, **overrides) -> ConflictProposal:
        values = {field: getattr(record, field) for field in SCHEDULE_FIELDS}
        values.update(overrides)
        return ConflictProposal(**values)

    def _reject_on_conflict(self, proposal: ConflictProposal, *, exclude_id: str | None = None) -> None:
        report = self.detector.check_all_conflicts(proposal, exclude_id=exclude_id, exclude_kind="session")
        if report.has_conflicts:
            logger.info("Rejected schedule for %s on %s: %s", proposal.class_name, proposal.date, report.counts())
            raise conflict_error(report)

    def _notify(self, record: ClassSession, event: SessionEventKind, actor_id: str) -> bool:
        return dispatch_session_event(self.notifier, record, event, actor_id=actor_id)

    def create_session(self, payload: ClassSessionCreate, *, actor_id: str) -> ClassSession:
        if payload.check_conflicts:
            self._reject_on_conflict(payload.to_proposal())

        record = ClassSession(
            title=payload.title or f"{payload.subject} - {payload.class_name}",
            subject=payload.subject,
            class_name=payload.class_name,
            section=payload.section,
            instructor_id=payload.instructor_id,
            instructor_name=payload.instructor_name,
            date=payload.date,
            start_time=payload.start_time,
            end_time=payload.end_time,
            duration=duration_minutes(payload.start_time, payload.end_time),
            room=payload.room,
            meeting_link=payload.meeting_link,
            is_online=payload.is_online,
            capacity=payload.capacity,
            status=SessionStatus.scheduled,
            materials=[
                {**item.model_dump(), "uploadedAt": _utc_now().isoformat()} for item in payload.materials
            ],
            prerequisites=list(payload.prerequisites),
            description=payload.description,
            notifications_sent={"created": False, "reminder24h": False, "reminder1h": False},
            created_by=actor_id,
        )
        self.store.save_session(record)
        self.store.commit()
        logger.info("Session %s created for %s on %s", record.id, record.class_name, record.date)

        if payload.notify and self._notify(record, SessionEventKind.created, actor_id):
            record.notifications_sent = {**record.notifications_sent, "created": True}
            self.store.commit()
        self.store.refresh(record)
        return record

    def update_session(self, session_id: str, payload: ClassSessionUpdate, *, actor_id: str) -> ClassSession:
        record = self.get(session_id)
        data = payload.model_dump(exclude_unset=True, exclude={"bypass_conflicts"})
        data = {key: value for key, value in data.items() if value is not None or key in CLEARABLE_FIELDS}

        schedule_changes = {
            field: data[field] for field in SCHEDULE_FIELDS if field in data and data[field] != getattr(record, field)
        }
        if schedule_changes:
            ensure_transition(record, "change the schedule of")
            duration = duration_minutes(
                schedule_changes.get("start_time", record.start_time),
                schedule_changes.get("end_time", record.end_time),
            )
            proposal = self._proposal_for(record, **schedule_changes)
            if not payload.bypass_conflicts:
                self._reject_on_conflict(proposal, exclude_id=record.id)
            data["duration"] = duration

        for key, value in data.items():
            setattr(record, key, value)
        self.store.commit()
        logger.info("Session %s updated by %s: %s", record.id, actor_id, sorted(data))
        self.store.refresh(record)
        return record

    def reschedule_session(self, session_id: str, payload: RescheduleRequest, *, actor_id: str) -> ClassSession:
        record = self.get(session_id)
        ensure_transition(record, "reschedule")

        room = payload.room or record.room
        proposal = self._proposal_for(
            record,
            date=payload.date,
            start_time=payload.start_time,
            end_time=payload.end_time,
            room=room,
        )
        self._reject_on_conflict(proposal, exclude_id=record.id)

        old_date = record.date
        record.rescheduled_from = old_date
        record.rescheduled_to = payload.date
        record.date = payload.date
        record.start_time = payload.start_time
        record.end_time = payload.end_time
        record.duration = duration_minutes(payload.start_time, payload.end_time)
        record.room = room
        record.status = SessionStatus.rescheduled
        # Reminders must fire again for the new slot.
        record.notifications_sent = {**(record.notifications_sent or {}), "reminder24h": False, "reminder1h": False}
        self.store.commit()
        logger.info("Session %s rescheduled from %s to %s", record.id, old_date, payload.date)

        if payload.notify:
            self._notify(record, SessionEventKind.rescheduled, actor_id)
        self.store.refresh(record)
        return record

    def cancel_session(self, session_id: str, payload: CancelRequest, *, actor_id: str) -> ClassSession:
        record = self.get(session_id)
        ensure_transition(record, "cancel")

        record.status = SessionStatus.cancelled
        record.cancel_reason = payload.reason
        self.store.commit()
        logger.info("Session %s cancelled by %s", record.id, actor_id)

        if payload.notify:
            self._notify(record, SessionEventKind.cancelled, actor_id)
        self.store.refresh(record)
        return record

    def start_session(self, session_id: str, *, actor_id: str) -> ClassSession:
        record = self.get(session_id)
        ensure_transition(record, "start")
        record.status = SessionStatus.ongoing
        self.store.commit()
        logger.info("Session %s started by %s", record.id, actor_id)
        self.store.refresh(record)
        return record

    def complete_session(self, session_id: str, *, actor_id: str) -> ClassSession:
        record = self.get(session_id)
        ensure_transition(record, "complete")
        record.status = SessionStatus.completed
        self.store.commit()
        logger.info("Session %s completed by %s", record.id, actor_id)
        self.store.refresh(record)
        return record

    def add_materials(self, session_id: str, materials: list[MaterialIn], *, actor_id: str) -> ClassSession:
        record = self.get(session_id)
        ensure_transition(record, "add materials to")

        uploaded_at = _utc_now().isoformat()
        record.materials = [
            *(record.materials or []),
            *({**item.model_dump(), "uploadedAt": uploaded_at} for item in materials),
        ]
        self.store.commit()

        self._notify(record, SessionEventKind.materials_added, actor_id)
        self.store.refresh(record)
        return record

    def delete_session(self, session_id: str, *, actor_id: str) -> None:
        record = self.get(session_id)
        self.store.delete_session(record)
        self.store.commit()
        logger.info("Session %s deleted by %s", session_id, actor_id)
