from __future__ import annotations

from datetime import date, timedelta
from typing import Iterator

from app.core.exceptions import ValidationError
from app.models.class_session import SessionStatus
from app.models.schedule_template import RecurrencePattern, ScheduleTemplate
from app.schemas.class_session import SessionDraft
from app.services.intervals import weekday_number

DEFAULT_MAX_WEEKS = 52


def validate_recurrence(pattern: RecurrencePattern, recurrence_days: list[int] | None) -> None:
    days = recurrence_days or []
    if any(day < 0 or day > 6 for day in days):
        raise ValidationError(
            "Recurrence days must be between 0 (Sunday) and 6 (Saturday)",
            details={"recurrenceDays": days},
        )
    if pattern in (RecurrencePattern.weekly, RecurrencePattern.custom) and not days:
        raise ValidationError(
            f"Recurrence days are required for {pattern.value} pattern",
            details={"recurrencePattern": pattern.value},
        )


def resolve_date_window(
    template: ScheduleTemplate,
    start_date: date | None = None,
    end_date: date | None = None,
    number_of_weeks: int | None = None,
    *,
    today: date | None = None,
    max_weeks: int = DEFAULT_MAX_WEEKS,
) -> tuple[date, date]:
    """Return the inclusive [start, end] window a template should be expanded over.

    Explicit arguments win over the template's stored values. When no end date
    is available a week count is used; ``n`` weeks cover exactly ``7 * n`` days.
    """
    start = start_date or template.start_date or today or date.today()

    weeks = number_of_weeks or template.number_of_weeks
    if weeks is not None and weeks > max_weeks:
        raise ValidationError(
            f"Number of weeks cannot exceed {max_weeks}",
            details={"numberOfWeeks": weeks, "maxWeeks": max_weeks},
        )

    end = end_date
    if end is None and number_of_weeks:
        end = start + timedelta(days=number_of_weeks * 7 - 1)
    if end is None:
        end = template.end_date
    if end is None and template.number_of_weeks:
        end = start + timedelta(days=template.number_of_weeks * 7 - 1)
    if end is None:
        raise ValidationError("Insufficient date range: end date or number of weeks must be specified")

    if end < start:
        raise ValidationError(
            "End date must not be before start date",
            details={"startDate": start.isoformat(), "endDate": end.isoformat()},
        )
    if (end - start).days + 1 > max_weeks * 7:
        raise ValidationError(
            f"Date range cannot span more than {max_weeks} weeks",
            details={"startDate": start.isoformat(), "endDate": end.isoformat()},
        )
    return start, end


def iter_occurrence_dates(
    pattern: RecurrencePattern, recurrence_days: list[int] | None, start: date, end: date
) -> Iterator[date]:
    days = set(recurrence_days or [])
    current = start
    while current <= end:
        if pattern == RecurrencePattern.daily:
            yield current
        elif pattern in (RecurrencePattern.weekly, RecurrencePattern.custom):
            if weekday_number(current) in days:
                yield current
        else:  # pragma: no cover - closed enum
            raise ValidationError(f"Unsupported recurrence pattern: {pattern}")
        current += timedelta(days=1)


def generate_drafts(
    template: ScheduleTemplate,
    creator_id: str,
    start_date: date | None = None,
    end_date: date | None = None,
    number_of_weeks: int | None = None,
    *,
    today: date | None = None,
    max_weeks: int = DEFAULT_MAX_WEEKS,
) -> list[SessionDraft]:
    validate_recurrence(template.recurrence_pattern, template.recurrence_days)
    start, end = resolve_date_window(
        template,
        start_date,
        end_date,
        number_of_weeks,
        today=today,
        max_weeks=max_weeks,
    )
    return [
        SessionDraft(
            title=f"{template.subject} - {template.class_name}",
            subject=template.subject,
            class_name=template.class_name,
            section=template.section,
            instructor_id=template.instructor_id,
            instructor_name=template.instructor_name,
            date=occurrence,
            start_time=template.start_time,
            end_time=template.end_time,
            duration=template.duration,
            room=template.room,
            meeting_link=template.meeting_link,
            is_online=template.is_online,
            capacity=template.capacity,
            recurrence_id=template.id,
            status=SessionStatus.scheduled,
            created_by=creator_id,
        )
        for occurrence in iter_occurrence_dates(template.recurrence_pattern, template.recurrence_days, start, end)
    ]
