from app.models.class_session import (  # noqa: F401
    ACTIVE_SESSION_STATUSES,
    TERMINAL_SESSION_STATUSES,
    ClassSession,
    SessionStatus,
)
from app.models.exam import ACTIVE_EXAM_STATUSES, Exam, ExamStatus  # noqa: F401
from app.models.notification import Notification, SessionEventKind  # noqa: F401
from app.models.schedule_template import RecurrencePattern, ScheduleTemplate  # noqa: F401
