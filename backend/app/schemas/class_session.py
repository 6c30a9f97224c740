from __future__ import annotations

import datetime as dt
from typing import Literal

from pydantic import Field, field_validator, model_validator

from app.models.class_session import SessionStatus
from app.schemas.base import ScheduleModel, hhmm_to_minutes, normalize_optional_text, validate_hhmm
from app.schemas.conflict import ConflictProposal

MaterialType = Literal["pdf", "video", "link", "document", "other"]


class MaterialIn(ScheduleModel):
    name: str = Field(min_length=1, max_length=200)
    url: str = Field(min_length=1, max_length=1000)
    type: MaterialType = "other"


class MaterialOut(MaterialIn):
    uploaded_at: dt.datetime | None = None


class MaterialsAdd(ScheduleModel):
    materials: list[MaterialIn] = Field(min_length=1, max_length=50)


class ClassSessionCreate(ScheduleModel):
    title: str | None = Field(default=None, max_length=200)
    subject: str = Field(min_length=1, max_length=200)
    class_name: str = Field(alias="class", min_length=1, max_length=100)
    section: str | None = Field(default=None, max_length=50)
    instructor_id: str | None = Field(default=None, max_length=36)
    instructor_name: str | None = Field(default=None, max_length=200)
    date: dt.date
    start_time: str
    end_time: str
    room: str | None = Field(default=None, max_length=100)
    meeting_link: str | None = Field(default=None, max_length=500)
    is_online: bool = False
    capacity: int = Field(default=0, ge=0, le=10000)
    materials: list[MaterialIn] = Field(default_factory=list, max_length=50)
    prerequisites: list[str] = Field(default_factory=list, max_length=50)
    description: str | None = Field(default=None, max_length=2000)
    check_conflicts: bool = True
    notify: bool = True

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, value: str) -> str:
        return validate_hhmm(value)

    @field_validator("section", "instructor_id", "room", "meeting_link")
    @classmethod
    def blank_to_none(cls, value: str | None) -> str | None:
        return normalize_optional_text(value)

    @model_validator(mode="after")
    def validate_order(self) -> "ClassSessionCreate":
        if hhmm_to_minutes(self.end_time) <= hhmm_to_minutes(self.start_time):
            raise ValueError("End time must be after start time")
        return self

    def to_proposal(self) -> ConflictProposal:
        return ConflictProposal(
            instructor_id=self.instructor_id,
            room=self.room,
            class_name=self.class_name,
            section=self.section,
            date=self.date,
            start_time=self.start_time,
            end_time=self.end_time,
        )


class ClassSessionUpdate(ScheduleModel):
    title: str | None = Field(default=None, min_length=1, max_length=200)
    subject: str | None = Field(default=None, min_length=1, max_length=200)
    class_name: str | None = Field(default=None, alias="class", min_length=1, max_length=100)
    section: str | None = Field(default=None, max_length=50)
    instructor_id: str | None = Field(default=None, max_length=36)
    instructor_name: str | None = Field(default=None, max_length=200)
    date: dt.date | None = None
    start_time: str | None = None
    end_time: str | None = None
    room: str | None = Field(default=None, max_length=100)
    meeting_link: str | None = Field(default=None, max_length=500)
    is_online: bool | None = None
    capacity: int | None = Field(default=None, ge=0, le=10000)
    prerequisites: list[str] | None = Field(default=None, max_length=50)
    description: str | None = Field(default=None, max_length=2000)
    bypass_conflicts: bool = False

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return validate_hhmm(value)

    @field_validator("section", "instructor_id", "room", "meeting_link")
    @classmethod
    def blank_to_none(cls, value: str | None) -> str | None:
        return normalize_optional_text(value)


class RescheduleRequest(ScheduleModel):
    date: dt.date
    start_time: str
    end_time: str
    room: str | None = Field(default=None, max_length=100)
    notify: bool = True

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, value: str) -> str:
        return validate_hhmm(value)

    @field_validator("room")
    @classmethod
    def blank_to_none(cls, value: str | None) -> str | None:
        return normalize_optional_text(value)

    @model_validator(mode="after")
    def validate_order(self) -> "RescheduleRequest":
        if hhmm_to_minutes(self.end_time) <= hhmm_to_minutes(self.start_time):
            raise ValueError("End time must be after start time")
        return self


class CancelRequest(ScheduleModel):
    reason: str | None = Field(default=None, max_length=1000)
    notify: bool = True


class SessionDraft(ScheduleModel):
    """A session produced by a template but not yet persisted."""

    title: str
    subject: str
    class_name: str = Field(alias="class")
    section: str | None = None
    instructor_id: str | None = None
    instructor_name: str | None = None
    date: dt.date
    start_time: str
    end_time: str
    duration: int
    room: str | None = None
    meeting_link: str | None = None
    is_online: bool = False
    capacity: int = 0
    recurrence_id: str | None = None
    status: SessionStatus = SessionStatus.scheduled
    created_by: str

    def to_proposal(self) -> ConflictProposal:
        return ConflictProposal(
            instructor_id=self.instructor_id,
            room=self.room,
            class_name=self.class_name,
            section=self.section,
            date=self.date,
            start_time=self.start_time,
            end_time=self.end_time,
        )


class ClassSessionOut(ScheduleModel):
    id: str
    title: str
    subject: str
    class_name: str = Field(alias="class")
    section: str | None = None
    instructor_id: str | None = None
    instructor_name: str | None = None
    date: dt.date
    start_time: str
    end_time: str
    duration: int
    room: str | None = None
    meeting_link: str | None = None
    is_online: bool
    capacity: int
    status: SessionStatus
    cancel_reason: str | None = None
    rescheduled_from: dt.date | None = None
    rescheduled_to: dt.date | None = None
    materials: list[MaterialOut] = Field(default_factory=list)
    prerequisites: list[str] = Field(default_factory=list)
    description: str | None = None
    recurrence_id: str | None = None
    notifications_sent: dict[str, bool] = Field(default_factory=dict)
    created_by: str
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None
