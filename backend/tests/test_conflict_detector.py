from app.models.class_session import SessionStatus
from app.models.exam import ExamStatus
from app.schemas.conflict import ConflictProposal

from conftest import MONDAY


def proposal(**overrides) -> ConflictProposal:
    values = {
        "instructor_id": "instructor-1",
        "room": "R101",
        "class_name": "10",
        "section": "A",
        "date": MONDAY,
        "start_time": "09:30",
        "end_time": "10:30",
    }
    values.update(overrides)
    return ConflictProposal(**values)


def test_overlapping_session_is_reported_in_every_shared_dimension(detector, make_class_session):
    existing = make_class_session()

    report = detector.check_all_conflicts(proposal())

    assert report.has_conflicts
    assert [item.id for item in report.instructor] == [existing.id]
    assert [item.id for item in report.room] == [existing.id]
    assert [item.id for item in report.students] == [existing.id]
    assert report.instructor[0].type == "session"
    assert report.instructor[0].label == existing.title


def test_back_to_back_slots_are_not_conflicts(detector, make_class_session):
    make_class_session(start_time="09:00", end_time="10:00")

    report = detector.check_all_conflicts(proposal(start_time="10:00", end_time="11:00"))

    assert not report.has_conflicts
    assert report.counts() == {"instructor": 0, "room": 0, "students": 0}


def test_dimensions_are_checked_independently(detector, make_class_session):
    existing = make_class_session(room="R202", class_name="11", section="B")

    report = detector.check_all_conflicts(proposal())

    assert [item.id for item in report.instructor] == [existing.id]
    assert report.room == []
    assert report.students == []


def test_missing_instructor_or_room_skips_that_dimension(detector, make_class_session):
    make_class_session()

    report = detector.check_all_conflicts(proposal(instructor_id=None, room=None, class_name="12"))

    assert not report.has_conflicts


def test_terminal_sessions_do_not_block(detector, make_class_session):
    make_class_session(status=SessionStatus.cancelled)
    make_class_session(status=SessionStatus.completed)

    assert not detector.check_all_conflicts(proposal()).has_conflicts


def test_rescheduled_and_ongoing_sessions_block(detector, make_class_session):
    rescheduled = make_class_session(status=SessionStatus.rescheduled)
    ongoing = make_class_session(status=SessionStatus.ongoing, instructor_id="instructor-2", class_name="12")

    report = detector.check_all_conflicts(proposal())

    assert [item.id for item in report.instructor] == [rescheduled.id]
    assert {item.id for item in report.room} == {rescheduled.id, ongoing.id}


def test_other_date_does_not_block(detector, make_class_session):
    make_class_session(date=MONDAY.replace(day=3))

    assert not detector.check_all_conflicts(proposal()).has_conflicts


def test_excluded_session_is_ignored(detector, make_class_session):
    existing = make_class_session()

    report = detector.check_all_conflicts(proposal(), exclude_id=existing.id, exclude_kind="session")

    assert not report.has_conflicts


def test_different_sections_of_a_class_do_not_collide(detector, make_class_session):
    make_class_session(instructor_id="instructor-2", room="R202", section="B")

    report = detector.check_all_conflicts(proposal(section="A"))

    assert report.students == []


def test_class_wide_session_collides_with_any_section(detector, make_class_session):
    class_wide = make_class_session(instructor_id="instructor-2", room="R202", section=None)

    with_section = detector.check_all_conflicts(proposal(section="C"))
    without_section = detector.check_all_conflicts(
        proposal(section=None, instructor_id="instructor-9", room="R303")
    )

    assert [item.id for item in with_section.students] == [class_wide.id]
    assert [item.id for item in without_section.students] == [class_wide.id]


def test_exam_in_room_and_cohort_is_reported(detector, make_exam):
    exam = make_exam(room="R101")

    report = detector.check_all_conflicts(proposal())

    assert [item.id for item in report.room] == [exam.id]
    assert [item.id for item in report.students] == [exam.id]
    assert report.room[0].type == "exam"
    assert report.room[0].label == "Mid-term Physics"
    assert report.instructor == []


def test_exams_without_times_or_inactive_are_ignored(detector, make_exam):
    make_exam(room="R101", start_time=None, end_time=None)
    make_exam(room="R101", status=ExamStatus.completed)
    make_exam(room="R101", status=ExamStatus.cancelled)

    assert not detector.check_all_conflicts(proposal()).has_conflicts


def test_excluding_an_exam_still_checks_its_room(detector, make_exam):
    exam = make_exam(room="R101")

    report = detector.check_all_conflicts(proposal(), exclude_id=exam.id, exclude_kind="exam")

    assert report.students == []
    assert [item.id for item in report.room] == [exam.id]


def test_every_overlapping_record_is_listed(detector, make_class_session):
    first = make_class_session(start_time="08:00", end_time="09:45", instructor_id="t-a", room="R1", class_name="7")
    second = make_class_session(start_time="10:15", end_time="11:00", instructor_id="t-b", room="R2", class_name="7")

    report = detector.check_all_conflicts(proposal(class_name="7", section=None, instructor_id=None, room=None))

    assert {item.id for item in report.students} == {first.id, second.id}
