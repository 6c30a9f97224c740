from __future__ import annotations

import logging
from time import perf_counter
from typing import Callable, Sequence

from app.core.exceptions import BatchValidationTimeout
from app.schemas.class_session import SessionDraft
from app.schemas.conflict import BatchConflict, BatchValidationSummary, DraftValidation
from app.services.conflict_detector import ConflictDetector, cohorts_collide
from app.services.intervals import ranges_overlap, same_day

logger = logging.getLogger(__name__)


def find_batch_conflicts(drafts: Sequence[SessionDraft], index: int) -> list[BatchConflict]:
    """Compare ``drafts[index]`` against every earlier draft of the same batch.

    One overlapping pair can produce an entry per colliding dimension.
    """
    draft = drafts[index]
    conflicts: list[BatchConflict] = []
    for earlier_index in range(index):
        other = drafts[earlier_index]
        if not same_day(draft.date, other.date):
            continue
        if not ranges_overlap(draft.start_time, draft.end_time, other.start_time, other.end_time):
            continue

        def _entry(kind: str) -> BatchConflict:
            return BatchConflict(
                type=kind,
                batch_index=earlier_index,
                date=other.date,
                start_time=other.start_time,
                end_time=other.end_time,
            )

        if draft.instructor_id and other.instructor_id and draft.instructor_id == other.instructor_id:
            conflicts.append(_entry("batch-instructor"))
        if draft.room and other.room and draft.room == other.room:
            conflicts.append(_entry("batch-room"))
        if cohorts_collide(draft.class_name, draft.section, other.class_name, other.section):
            conflicts.append(_entry("batch-students"))
    return conflicts


def validate_batch(
    detector: ConflictDetector,
    drafts: Sequence[SessionDraft],
    *,
    budget_seconds: float | None = None,
    clock: Callable[[], float] = perf_counter,
) -> BatchValidationSummary:
    """Validate drafts in generation order against the store and each other.

    The intra-batch pass only looks backwards, so the order of ``drafts`` is
    significant and must be the generation (ascending date) order.
    """
    started = clock()
    results: list[DraftValidation] = []
    for index, draft in enumerate(drafts):
        if budget_seconds is not None and clock() - started > budget_seconds:
            raise BatchValidationTimeout(index, len(drafts), budget_seconds)

        report = detector.check_all_conflicts(draft.to_proposal())
        batch_conflicts = find_batch_conflicts(drafts, index)
        results.append(
            DraftValidation(
                index=index,
                date=draft.date,
                start_time=draft.start_time,
                end_time=draft.end_time,
                conflicts=report,
                batch_conflicts=batch_conflicts,
                has_conflicts=report.has_conflicts or bool(batch_conflicts),
            )
        )

    conflicting = sum(1 for item in results if item.has_conflicts)
    logger.debug("Validated %d drafts, %d with conflicts", len(results), conflicting)
    return BatchValidationSummary(
        results=results,
        total_drafts=len(results),
        conflicting_drafts=conflicting,
        has_any_conflicts=conflicting > 0,
    )
