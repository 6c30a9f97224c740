from __future__ import annotations

import logging

from app.models.class_session import ClassSession
from app.models.exam import Exam
from app.repositories.schedule_store import ScheduleStore
from app.schemas.conflict import ConflictEntry, ConflictProposal, ConflictRecordKind, ConflictReport
from app.services.intervals import ranges_overlap

logger = logging.getLogger(__name__)


def cohorts_collide(class_a: str, section_a: str | None, class_b: str, section_b: str | None) -> bool:
    if class_a != class_b:
        return False
    if not section_a or not section_b:
        return True
    return section_a == section_b


def session_entry(record: ClassSession) -> ConflictEntry:
    return ConflictEntry(
        type="session",
        id=record.id,
        label=record.title,
        date=record.date,
        start_time=record.start_time,
        end_time=record.end_time,
        room=record.room,
        subject=record.subject,
    )


def exam_entry(record: Exam) -> ConflictEntry:
    return ConflictEntry(
        type="exam",
        id=record.id,
        label=record.name,
        date=record.date,
        start_time=record.start_time,
        end_time=record.end_time,
        room=record.room,
        subject=record.subject,
    )


class ConflictDetector:
    """Reports persisted sessions and exams that overlap a proposed slot.

    Each dimension (instructor, room, students) is checked independently and
    every overlapping record is reported. Detection never raises for a
    conflict; callers decide whether a non-empty report is an error.
    """

    def __init__(self, store: ScheduleStore) -> None:
        self.store = store

    def _overlapping(self, proposal: ConflictProposal, records) -> list:
        return [
            record
            for record in records
            if ranges_overlap(proposal.start_time, proposal.end_time, record.start_time, record.end_time)
        ]

    def detect_instructor_conflicts(
        self, proposal: ConflictProposal, *, exclude_session_id: str | None = None
    ) -> list[ConflictEntry]:
        if not proposal.instructor_id:
            return []
        sessions = self.store.find_sessions_by_instructor_and_date(
            proposal.instructor_id, proposal.date, exclude_id=exclude_session_id
        )
        return [session_entry(item) for item in self._overlapping(proposal, sessions)]

    def detect_room_conflicts(
        self, proposal: ConflictProposal, *, exclude_session_id: str | None = None
    ) -> list[ConflictEntry]:
        if not proposal.room:
            return []
        sessions = self.store.find_sessions_by_room_and_date(
            proposal.room, proposal.date, exclude_id=exclude_session_id
        )
        exams = self.store.find_exams_by_room_and_date(proposal.room, proposal.date)
        conflicts = [session_entry(item) for item in self._overlapping(proposal, sessions)]
        conflicts.extend(exam_entry(item) for item in self._overlapping(proposal, exams))
        return conflicts

    def detect_student_conflicts(
        self,
        proposal: ConflictProposal,
        *,
        exclude_id: str | None = None,
        exclude_kind: ConflictRecordKind = "session",
    ) -> list[ConflictEntry]:
        sessions = self.store.find_sessions_by_cohort_and_date(
            proposal.class_name,
            proposal.section,
            proposal.date,
            exclude_id=exclude_id if exclude_kind == "session" else None,
        )
        exams = self.store.find_exams_by_cohort_and_date(
            proposal.class_name,
            proposal.section,
            proposal.date,
            exclude_id=exclude_id if exclude_kind == "exam" else None,
        )
        conflicts = [session_entry(item) for item in self._overlapping(proposal, sessions)]
        conflicts.extend(exam_entry(item) for item in self._overlapping(proposal, exams))
        return conflicts

    def check_all_conflicts(
        self,
        proposal: ConflictProposal,
        exclude_id: str | None = None,
        exclude_kind: ConflictRecordKind = "session",
    ) -> ConflictReport:
        exclude_session_id = exclude_id if exclude_kind == "session" else None
        report = ConflictReport(
            instructor=self.detect_instructor_conflicts(proposal, exclude_session_id=exclude_session_id),
            room=self.detect_room_conflicts(proposal, exclude_session_id=exclude_session_id),
            students=self.detect_student_conflicts(proposal, exclude_id=exclude_id, exclude_kind=exclude_kind),
        )
        if report.has_conflicts:
            logger.debug(
                "Conflicts for %s %s-%s: %s",
                proposal.date.isoformat(),
                proposal.start_time,
                proposal.end_time,
                report.counts(),
            )
        return report
