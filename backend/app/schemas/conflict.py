from __future__ import annotations

import datetime as dt
from typing import Literal

from pydantic import Field, field_validator, model_validator

from app.schemas.base import ScheduleModel, hhmm_to_minutes, normalize_optional_text, validate_hhmm

ConflictRecordKind = Literal["session", "exam"]
BatchConflictType = Literal["batch-instructor", "batch-room", "batch-students"]


class ConflictProposal(ScheduleModel):
    instructor_id: str | None = Field(default=None, max_length=36)
    room: str | None = Field(default=None, max_length=100)
    class_name: str = Field(alias="class", min_length=1, max_length=100)
    section: str | None = Field(default=None, max_length=50)
    date: dt.date
    start_time: str
    end_time: str

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, value: str) -> str:
        return validate_hhmm(value)

    @field_validator("instructor_id", "room", "section")
    @classmethod
    def blank_to_none(cls, value: str | None) -> str | None:
        return normalize_optional_text(value)

    @model_validator(mode="after")
    def validate_order(self) -> "ConflictProposal":
        if hhmm_to_minutes(self.end_time) <= hhmm_to_minutes(self.start_time):
            raise ValueError("End time must be after start time")
        return self


class ConflictCheckRequest(ConflictProposal):
    exclude_id: str | None = None
    exclude_kind: ConflictRecordKind = "session"


class ConflictEntry(ScheduleModel):
    type: ConflictRecordKind
    id: str
    label: str
    date: dt.date
    start_time: str
    end_time: str
    room: str | None = None
    subject: str | None = None


class ConflictReport(ScheduleModel):
    instructor: list[ConflictEntry] = Field(default_factory=list)
    room: list[ConflictEntry] = Field(default_factory=list)
    students: list[ConflictEntry] = Field(default_factory=list)
    has_conflicts: bool = False

    @model_validator(mode="after")
    def derive_has_conflicts(self) -> "ConflictReport":
        self.has_conflicts = bool(self.instructor or self.room or self.students)
        return self

    def counts(self) -> dict[str, int]:
        return {"instructor": len(self.instructor), "room": len(self.room), "students": len(self.students)}


class BatchConflict(ScheduleModel):
    type: BatchConflictType
    batch_index: int
    date: dt.date
    start_time: str
    end_time: str


class DraftValidation(ScheduleModel):
    index: int
    date: dt.date
    start_time: str
    end_time: str
    conflicts: ConflictReport
    batch_conflicts: list[BatchConflict] = Field(default_factory=list)
    has_conflicts: bool = False


class BatchValidationSummary(ScheduleModel):
    results: list[DraftValidation] = Field(default_factory=list)
    total_drafts: int = 0
    conflicting_drafts: int = 0
    has_any_conflicts: bool = False

    def conflicting_indices(self) -> set[int]:
        return {item.index for item in self.results if item.has_conflicts}
