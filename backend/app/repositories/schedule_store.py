"""Explicit read/write access to sessions, exams and templates."""

from __future__ import annotations

from datetime import date, datetime
from typing import Iterable

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from app.models.class_session import ACTIVE_SESSION_STATUSES, ClassSession, SessionStatus
from app.models.exam import ACTIVE_EXAM_STATUSES, Exam
from app.models.schedule_template import ScheduleTemplate


def _cohort_filter(model, class_name: str, section: str | None):
    # A class-wide record (no section) involves every section of that class.
    clauses = [model.class_name == class_name]
    if section:
        clauses.append(or_(model.section == section, model.section.is_(None)))
    return clauses


class ScheduleStore:
    def __init__(self, db: Session) -> None:
        self.db = db

    # -- sessions -----------------------------------------------------------

    def get_session(self, session_id: str) -> ClassSession | None:
        return self.db.get(ClassSession, session_id)

    def list_sessions(
        self,
        *,
        class_name: str | None = None,
        section: str | None = None,
        subject: str | None = None,
        instructor_id: str | None = None,
        status: SessionStatus | None = None,
        from_date: date | None = None,
        to_date: date | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[ClassSession]:
        query = select(ClassSession)
        if class_name:
            query = query.where(ClassSession.class_name == class_name)
        if section:
            query = query.where(ClassSession.section == section)
        if subject:
            query = query.where(ClassSession.subject == subject)
        if instructor_id:
            query = query.where(ClassSession.instructor_id == instructor_id)
        if status is not None:
            query = query.where(ClassSession.status == status)
        if from_date is not None:
            query = query.where(ClassSession.date >= from_date)
        if to_date is not None:
            query = query.where(ClassSession.date <= to_date)
        query = query.order_by(ClassSession.date, ClassSession.start_time).offset(offset).limit(limit)
        return list(self.db.execute(query).scalars())

    def list_upcoming(
        self,
        *,
        today: date,
        class_name: str | None = None,
        section: str | None = None,
        limit: int = 10,
    ) -> list[ClassSession]:
        query = select(ClassSession).where(
            ClassSession.status.in_(ACTIVE_SESSION_STATUSES),
            ClassSession.date >= today,
        )
        if class_name:
            query = query.where(*_cohort_filter(ClassSession, class_name, section))
        query = query.order_by(ClassSession.date, ClassSession.start_time).limit(limit)
        return list(self.db.execute(query).scalars())

    def _active_sessions_on(self, on_date: date, *clauses, exclude_id: str | None = None) -> list[ClassSession]:
        query = select(ClassSession).where(
            ClassSession.date == on_date,
            ClassSession.status.in_(ACTIVE_SESSION_STATUSES),
            *clauses,
        )
        if exclude_id:
            query = query.where(ClassSession.id != exclude_id)
        return list(self.db.execute(query.order_by(ClassSession.start_time)).scalars())

    def find_sessions_by_instructor_and_date(
        self, instructor_id: str, on_date: date, *, exclude_id: str | None = None
    ) -> list[ClassSession]:
        return self._active_sessions_on(on_date, ClassSession.instructor_id == instructor_id, exclude_id=exclude_id)

    def find_sessions_by_room_and_date(
        self, room: str, on_date: date, *, exclude_id: str | None = None
    ) -> list[ClassSession]:
        return self._active_sessions_on(on_date, ClassSession.room == room, exclude_id=exclude_id)

    def find_sessions_by_cohort_and_date(
        self, class_name: str, section: str | None, on_date: date, *, exclude_id: str | None = None
    ) -> list[ClassSession]:
        return self._active_sessions_on(
            on_date, *_cohort_filter(ClassSession, class_name, section), exclude_id=exclude_id
        )

    def save_session(self, record: ClassSession) -> ClassSession:
        self.db.add(record)
        self.db.flush()
        return record

    def save_sessions(self, records: Iterable[ClassSession]) -> list[ClassSession]:
        items = list(records)
        self.db.add_all(items)
        self.db.flush()
        return items

    def delete_session(self, record: ClassSession) -> None:
        self.db.delete(record)
        self.db.flush()

    # -- exams (read only) --------------------------------------------------

    def _active_exams_on(self, on_date: date, *clauses, exclude_id: str | None = None) -> list[Exam]:
        query = select(Exam).where(
            Exam.date == on_date,
            Exam.status.in_(ACTIVE_EXAM_STATUSES),
            Exam.start_time.is_not(None),
            Exam.end_time.is_not(None),
            *clauses,
        )
        if exclude_id:
            query = query.where(Exam.id != exclude_id)
        return list(self.db.execute(query.order_by(Exam.start_time)).scalars())

    def find_exams_by_room_and_date(self, room: str, on_date: date) -> list[Exam]:
        return self._active_exams_on(on_date, Exam.room == room)

    def find_exams_by_cohort_and_date(
        self, class_name: str, section: str | None, on_date: date, *, exclude_id: str | None = None
    ) -> list[Exam]:
        return self._active_exams_on(on_date, *_cohort_filter(Exam, class_name, section), exclude_id=exclude_id)

    # -- templates ----------------------------------------------------------

    def get_template(self, template_id: str) -> ScheduleTemplate | None:
        return self.db.get(ScheduleTemplate, template_id)

    def list_templates(
        self,
        *,
        class_name: str | None = None,
        subject: str | None = None,
        is_active: bool | None = None,
    ) -> list[ScheduleTemplate]:
        query = select(ScheduleTemplate)
        if class_name:
            query = query.where(ScheduleTemplate.class_name == class_name)
        if subject:
            query = query.where(ScheduleTemplate.subject == subject)
        if is_active is not None:
            query = query.where(ScheduleTemplate.is_active.is_(is_active))
        return list(self.db.execute(query.order_by(ScheduleTemplate.created_at.desc())).scalars())

    def save_template(self, template: ScheduleTemplate) -> ScheduleTemplate:
        self.db.add(template)
        self.db.flush()
        return template

    def delete_template(self, template: ScheduleTemplate) -> None:
        self.db.delete(template)
        self.db.flush()

    def append_generated_ids(
        self, template: ScheduleTemplate, session_ids: Iterable[str], *, applied_at: datetime
    ) -> ScheduleTemplate:
        """Record provenance; ids already on the template are not duplicated."""
        merged = list(dict.fromkeys([*(template.generated_session_ids or []), *session_ids]))
        template.generated_session_ids = merged
        template.last_applied = applied_at
        self.db.flush()
        return template

    # -- unit of work -------------------------------------------------------

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()

    def refresh(self, record) -> None:
        self.db.refresh(record)
