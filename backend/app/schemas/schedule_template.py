from __future__ import annotations

import datetime as dt

from pydantic import Field, field_validator, model_validator

from app.models.schedule_template import RecurrencePattern
from app.schemas.base import ScheduleModel, hhmm_to_minutes, normalize_optional_text, validate_hhmm
from app.schemas.class_session import ClassSessionOut, SessionDraft
from app.schemas.conflict import BatchValidationSummary


def _normalize_days(value: list[int] | None) -> list[int] | None:
    if value is None:
        return None
    invalid = [day for day in value if day < 0 or day > 6]
    if invalid:
        raise ValueError("Recurrence days must be between 0 (Sunday) and 6 (Saturday)")
    return sorted(set(value))


class ScheduleTemplateBase(ScheduleModel):
    name: str = Field(min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=2000)
    subject: str = Field(min_length=1, max_length=200)
    class_name: str = Field(alias="class", min_length=1, max_length=100)
    section: str | None = Field(default=None, max_length=50)
    instructor_id: str | None = Field(default=None, max_length=36)
    instructor_name: str | None = Field(default=None, max_length=200)
    room: str | None = Field(default=None, max_length=100)
    meeting_link: str | None = Field(default=None, max_length=500)
    is_online: bool = False
    capacity: int = Field(default=0, ge=0, le=10000)
    recurrence_pattern: RecurrencePattern
    recurrence_days: list[int] = Field(default_factory=list, max_length=7)
    start_time: str
    end_time: str
    start_date: dt.date | None = None
    end_date: dt.date | None = None
    number_of_weeks: int | None = Field(default=None, ge=1, le=52)

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, value: str) -> str:
        return validate_hhmm(value)

    @field_validator("recurrence_days")
    @classmethod
    def validate_days(cls, value: list[int]) -> list[int]:
        return _normalize_days(value)

    @field_validator("section", "instructor_id", "room", "meeting_link")
    @classmethod
    def blank_to_none(cls, value: str | None) -> str | None:
        return normalize_optional_text(value)

    @model_validator(mode="after")
    def validate_template(self) -> "ScheduleTemplateBase":
        if hhmm_to_minutes(self.end_time) <= hhmm_to_minutes(self.start_time):
            raise ValueError("End time must be after start time")
        if self.recurrence_pattern != RecurrencePattern.daily and not self.recurrence_days:
            raise ValueError("Recurrence days are required for weekly and custom patterns")
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("End date must not be before start date")
        return self


class ScheduleTemplateCreate(ScheduleTemplateBase):
    pass


class ScheduleTemplateUpdate(ScheduleModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=2000)
    subject: str | None = Field(default=None, min_length=1, max_length=200)
    class_name: str | None = Field(default=None, alias="class", min_length=1, max_length=100)
    section: str | None = Field(default=None, max_length=50)
    instructor_id: str | None = Field(default=None, max_length=36)
    instructor_name: str | None = Field(default=None, max_length=200)
    room: str | None = Field(default=None, max_length=100)
    meeting_link: str | None = Field(default=None, max_length=500)
    is_online: bool | None = None
    capacity: int | None = Field(default=None, ge=0, le=10000)
    recurrence_pattern: RecurrencePattern | None = None
    recurrence_days: list[int] | None = Field(default=None, max_length=7)
    start_time: str | None = None
    end_time: str | None = None
    start_date: dt.date | None = None
    end_date: dt.date | None = None
    number_of_weeks: int | None = Field(default=None, ge=1, le=52)
    is_active: bool | None = None

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return validate_hhmm(value)

    @field_validator("recurrence_days")
    @classmethod
    def validate_days(cls, value: list[int] | None) -> list[int] | None:
        return _normalize_days(value)

    @field_validator("section", "instructor_id", "room", "meeting_link")
    @classmethod
    def blank_to_none(cls, value: str | None) -> str | None:
        return normalize_optional_text(value)


class ScheduleTemplateOut(ScheduleTemplateBase):
    id: str
    duration: int
    generated_session_ids: list[str] = Field(default_factory=list)
    last_applied: dt.datetime | None = None
    is_active: bool
    created_by: str
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None


class TemplateRange(ScheduleModel):
    start_date: dt.date | None = None
    end_date: dt.date | None = None
    number_of_weeks: int | None = Field(default=None, ge=1, le=52)

    @model_validator(mode="after")
    def validate_range(self) -> "TemplateRange":
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("End date must not be before start date")
        return self


class TemplateApplyRequest(TemplateRange):
    skip_conflicts: bool = False


class TemplatePreview(ScheduleModel):
    template_id: str
    template_name: str
    drafts: list[SessionDraft] = Field(default_factory=list)
    validation: BatchValidationSummary


class ApplyResult(ScheduleModel):
    template_id: str
    template_name: str
    created: int
    skipped: int
    sessions: list[ClassSessionOut] = Field(default_factory=list)
