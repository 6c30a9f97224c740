from fastapi import APIRouter, Depends, Query, status

from app.api.deps import get_current_actor, get_orchestrator, get_store, require_scheduler
from app.core.security import Actor
from app.repositories.schedule_store import ScheduleStore
from app.schemas.schedule_template import (
    ApplyResult,
    ScheduleTemplateCreate,
    ScheduleTemplateOut,
    ScheduleTemplateUpdate,
    TemplateApplyRequest,
    TemplatePreview,
    TemplateRange,
)
from app.services.template_orchestrator import TemplateOrchestrator

router = APIRouter()


@router.get("/", response_model=list[ScheduleTemplateOut])
def list_templates(
    class_name: str | None = Query(default=None, alias="class"),
    subject: str | None = None,
    is_active: bool | None = Query(default=None, alias="isActive"),
    current_actor: Actor = Depends(get_current_actor),
    store: ScheduleStore = Depends(get_store),
) -> list[ScheduleTemplateOut]:
    return store.list_templates(class_name=class_name, subject=subject, is_active=is_active)


@router.post("/", response_model=ScheduleTemplateOut, status_code=status.HTTP_201_CREATED)
def create_template(
    payload: ScheduleTemplateCreate,
    current_actor: Actor = Depends(require_scheduler),
    orchestrator: TemplateOrchestrator = Depends(get_orchestrator),
) -> ScheduleTemplateOut:
    return orchestrator.create_template(payload, actor_id=current_actor.id)


@router.get("/{template_id}", response_model=ScheduleTemplateOut)
def get_template(
    template_id: str,
    current_actor: Actor = Depends(get_current_actor),
    orchestrator: TemplateOrchestrator = Depends(get_orchestrator),
) -> ScheduleTemplateOut:
    return orchestrator.get_template(template_id)


@router.put("/{template_id}", response_model=ScheduleTemplateOut)
def update_template(
    template_id: str,
    payload: ScheduleTemplateUpdate,
    current_actor: Actor = Depends(require_scheduler),
    orchestrator: TemplateOrchestrator = Depends(get_orchestrator),
) -> ScheduleTemplateOut:
    return orchestrator.update_template(template_id, payload, actor_id=current_actor.id)


@router.delete("/{template_id}")
def delete_template(
    template_id: str,
    current_actor: Actor = Depends(require_scheduler),
    orchestrator: TemplateOrchestrator = Depends(get_orchestrator),
) -> dict:
    orchestrator.delete_template(template_id, actor_id=current_actor.id)
    return {"success": True}


@router.post("/{template_id}/preview", response_model=TemplatePreview)
def preview_template(
    template_id: str,
    payload: TemplateRange,
    current_actor: Actor = Depends(require_scheduler),
    orchestrator: TemplateOrchestrator = Depends(get_orchestrator),
) -> TemplatePreview:
    return orchestrator.preview(template_id, payload, actor_id=current_actor.id)


@router.post("/{template_id}/apply", response_model=ApplyResult, status_code=status.HTTP_201_CREATED)
def apply_template(
    template_id: str,
    payload: TemplateApplyRequest,
    current_actor: Actor = Depends(require_scheduler),
    orchestrator: TemplateOrchestrator = Depends(get_orchestrator),
) -> ApplyResult:
    return orchestrator.apply(
        template_id,
        payload,
        skip_conflicts=payload.skip_conflicts,
        actor_id=current_actor.id,
    )
