from __future__ import annotations

from datetime import date, datetime, timezone
import logging

from app.core.config import Settings
from app.core.exceptions import ConflictError, ResourceNotFoundError, ValidationError
from app.models.class_session import ClassSession
from app.models.schedule_template import RecurrencePattern, ScheduleTemplate
from app.repositories.schedule_store import ScheduleStore
from app.schemas.class_session import ClassSessionOut, SessionDraft
from app.schemas.conflict import BatchValidationSummary
from app.schemas.schedule_template import (
    ApplyResult,
    ScheduleTemplateCreate,
    ScheduleTemplateUpdate,
    TemplatePreview,
    TemplateRange,
)
from app.services.batch_validator import validate_batch
from app.services.conflict_detector import ConflictDetector
from app.services.intervals import duration_minutes
from app.services.recurrence import generate_drafts, validate_recurrence

logger = logging.getLogger(__name__)

PROTECTED_TEMPLATE_FIELDS = {"created_by", "generated_session_ids", "last_applied", "duration"}
# Optional columns an explicit null may clear; a null for any other field is ignored.
CLEARABLE_TEMPLATE_FIELDS = frozenset(
    {
        "section",
        "instructor_id",
        "instructor_name",
        "room",
        "meeting_link",
        "description",
        "start_date",
        "end_date",
        "number_of_weeks",
    }
)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TemplateOrchestrator:
    def __init__(self, store: ScheduleStore, detector: ConflictDetector, *, settings: Settings) -> None:
        self.store = store
        self.detector = detector
        self.settings = settings

    # -- template records ---------------------------------------------------

    def get_template(self, template_id: str) -> ScheduleTemplate:
        template = self.store.get_template(template_id)
        if template is None:
            raise ResourceNotFoundError("Template", template_id)
        return template

    def create_template(self, payload: ScheduleTemplateCreate, *, actor_id: str) -> ScheduleTemplate:
        self._check_weeks(payload.number_of_weeks)
        template = ScheduleTemplate(
            **payload.model_dump(),
            duration=duration_minutes(payload.start_time, payload.end_time),
            generated_session_ids=[],
            created_by=actor_id,
        )
        self.store.save_template(template)
        self.store.commit()
        logger.info("Template %s (%s) created by %s", template.id, template.name, actor_id)
        self.store.refresh(template)
        return template

    def update_template(self, template_id: str, payload: ScheduleTemplateUpdate, *, actor_id: str) -> ScheduleTemplate:
        template = self.get_template(template_id)
        data = {
            key: value
            for key, value in payload.model_dump(exclude_unset=True).items()
            if key not in PROTECTED_TEMPLATE_FIELDS and (value is not None or key in CLEARABLE_TEMPLATE_FIELDS)
        }
        pattern = data.get("recurrence_pattern", template.recurrence_pattern)
        days = data.get("recurrence_days", template.recurrence_days)
        validate_recurrence(RecurrencePattern(pattern), days)
        self._check_weeks(data.get("number_of_weeks"))

        duration = duration_minutes(
            data.get("start_time") or template.start_time,
            data.get("end_time") or template.end_time,
        )
        start_date = data.get("start_date", template.start_date)
        end_date = data.get("end_date", template.end_date)
        if start_date and end_date and end_date < start_date:
            raise ValidationError("End date must not be before start date")

        for key, value in data.items():
            setattr(template, key, value)
        template.duration = duration
        self.store.commit()
        logger.info("Template %s updated by %s: %s", template.id, actor_id, sorted(data))
        self.store.refresh(template)
        return template

    def delete_template(self, template_id: str, *, actor_id: str) -> None:
        # Generated sessions keep their recurrence_id; nothing cascades.
        template = self.get_template(template_id)
        self.store.delete_template(template)
        self.store.commit()
        logger.info("Template %s deleted by %s", template_id, actor_id)

    def _check_weeks(self, weeks: int | None) -> None:
        if weeks is not None and weeks > self.settings.max_template_weeks:
            raise ValidationError(
                f"Number of weeks cannot exceed {self.settings.max_template_weeks}",
                details={"numberOfWeeks": weeks},
            )

    # -- preview / apply ----------------------------------------------------

    def generate(
        self, template: ScheduleTemplate, window: TemplateRange, *, actor_id: str, today: date | None = None
    ) -> list[SessionDraft]:
        return generate_drafts(
            template,
            actor_id,
            window.start_date,
            window.end_date,
            window.number_of_weeks,
            today=today,
            max_weeks=self.settings.max_template_weeks,
        )

    def validate(self, drafts: list[SessionDraft]) -> BatchValidationSummary:
        return validate_batch(
            self.detector,
            drafts,
            budget_seconds=self.settings.batch_validation_budget(len(drafts)),
        )

    def preview(self, template_id: str, window: TemplateRange, *, actor_id: str) -> TemplatePreview:
        template = self.get_template(template_id)
        drafts = self.generate(template, window, actor_id=actor_id)
        return TemplatePreview(
            template_id=template.id,
            template_name=template.name,
            drafts=drafts,
            validation=self.validate(drafts),
        )

    def apply(
        self, template_id: str, window: TemplateRange, *, skip_conflicts: bool, actor_id: str
    ) -> ApplyResult:
        template = self.get_template(template_id)
        drafts = self.generate(template, window, actor_id=actor_id)
        if not drafts:
            raise ValidationError("No sessions would be generated with the given parameters")

        summary = self.validate(drafts)
        if summary.has_any_conflicts and not skip_conflicts:
            logger.info(
                "Template %s apply rejected: %d of %d drafts conflict",
                template.id,
                summary.conflicting_drafts,
                summary.total_drafts,
            )
            raise ConflictError(
                f"{summary.conflicting_drafts} sessions have scheduling conflicts",
                details={
                    "summary": {
                        "totalDrafts": summary.total_drafts,
                        "conflictingDrafts": summary.conflicting_drafts,
                        "hasAnyConflicts": summary.has_any_conflicts,
                    },
                    "conflictingSessions": [
                        item.model_dump(by_alias=True, mode="json") for item in summary.results if item.has_conflicts
                    ],
                },
            )

        skipped_indices = summary.conflicting_indices() if skip_conflicts else set()
        survivors = [draft for index, draft in enumerate(drafts) if index not in skipped_indices]
        records = self.store.save_sessions(ClassSession(**draft.model_dump()) for draft in survivors)
        self.store.append_generated_ids(template, [record.id for record in records], applied_at=_utc_now())
        self.store.commit()

        logger.info(
            "Template %s applied: %d created, %d skipped",
            template.id,
            len(records),
            len(drafts) - len(survivors),
        )
        return ApplyResult(
            template_id=template.id,
            template_name=template.name,
            created=len(records),
            skipped=len(drafts) - len(survivors),
            sessions=[ClassSessionOut.model_validate(record) for record in records],
        )
