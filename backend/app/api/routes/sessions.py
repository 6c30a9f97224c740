from datetime import date

from fastapi import APIRouter, Depends, Query, status

from app.api.deps import get_current_actor, get_lifecycle, get_store, require_scheduler
from app.core.security import Actor
from app.models.class_session import SessionStatus
from app.repositories.schedule_store import ScheduleStore
from app.schemas.class_session import (
    CancelRequest,
    ClassSessionCreate,
    ClassSessionOut,
    ClassSessionUpdate,
    MaterialsAdd,
    RescheduleRequest,
)
from app.services.session_lifecycle import SessionLifecycle

router = APIRouter()


@router.get("/", response_model=list[ClassSessionOut])
def list_sessions(
    class_name: str | None = Query(default=None, alias="class"),
    section: str | None = None,
    subject: str | None = None,
    instructor_id: str | None = Query(default=None, alias="instructorId"),
    status_filter: SessionStatus | None = Query(default=None, alias="status"),
    from_date: date | None = Query(default=None, alias="fromDate"),
    to_date: date | None = Query(default=None, alias="toDate"),
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    current_actor: Actor = Depends(get_current_actor),
    store: ScheduleStore = Depends(get_store),
) -> list[ClassSessionOut]:
    return store.list_sessions(
        class_name=class_name,
        section=section,
        subject=subject,
        instructor_id=instructor_id,
        status=status_filter,
        from_date=from_date,
        to_date=to_date,
        limit=limit,
        offset=offset,
    )


@router.get("/upcoming", response_model=list[ClassSessionOut])
def list_upcoming_sessions(
    class_name: str | None = Query(default=None, alias="class"),
    section: str | None = None,
    limit: int = Query(default=10, ge=1, le=100),
    current_actor: Actor = Depends(get_current_actor),
    store: ScheduleStore = Depends(get_store),
) -> list[ClassSessionOut]:
    return store.list_upcoming(today=date.today(), class_name=class_name, section=section, limit=limit)


@router.post("/", response_model=ClassSessionOut, status_code=status.HTTP_201_CREATED)
def create_session(
    payload: ClassSessionCreate,
    current_actor: Actor = Depends(require_scheduler),
    lifecycle: SessionLifecycle = Depends(get_lifecycle),
) -> ClassSessionOut:
    return lifecycle.create_session(payload, actor_id=current_actor.id)


@router.get("/{session_id}", response_model=ClassSessionOut)
def get_session(
    session_id: str,
    current_actor: Actor = Depends(get_current_actor),
    lifecycle: SessionLifecycle = Depends(get_lifecycle),
) -> ClassSessionOut:
    return lifecycle.get(session_id)


@router.put("/{session_id}", response_model=ClassSessionOut)
def update_session(
    session_id: str,
    payload: ClassSessionUpdate,
    current_actor: Actor = Depends(require_scheduler),
    lifecycle: SessionLifecycle = Depends(get_lifecycle),
) -> ClassSessionOut:
    return lifecycle.update_session(session_id, payload, actor_id=current_actor.id)


@router.post("/{session_id}/reschedule", response_model=ClassSessionOut)
def reschedule_session(
    session_id: str,
    payload: RescheduleRequest,
    current_actor: Actor = Depends(require_scheduler),
    lifecycle: SessionLifecycle = Depends(get_lifecycle),
) -> ClassSessionOut:
    return lifecycle.reschedule_session(session_id, payload, actor_id=current_actor.id)


@router.post("/{session_id}/cancel", response_model=ClassSessionOut)
def cancel_session(
    session_id: str,
    payload: CancelRequest,
    current_actor: Actor = Depends(require_scheduler),
    lifecycle: SessionLifecycle = Depends(get_lifecycle),
) -> ClassSessionOut:
    return lifecycle.cancel_session(session_id, payload, actor_id=current_actor.id)


@router.post("/{session_id}/start", response_model=ClassSessionOut)
def start_session(
    session_id: str,
    current_actor: Actor = Depends(require_scheduler),
    lifecycle: SessionLifecycle = Depends(get_lifecycle),
) -> ClassSessionOut:
    return lifecycle.start_session(session_id, actor_id=current_actor.id)


@router.post("/{session_id}/complete", response_model=ClassSessionOut)
def complete_session(
    session_id: str,
    current_actor: Actor = Depends(require_scheduler),
    lifecycle: SessionLifecycle = Depends(get_lifecycle),
) -> ClassSessionOut:
    return lifecycle.complete_session(session_id, actor_id=current_actor.id)


@router.post("/{session_id}/materials", response_model=ClassSessionOut)
def add_materials(
    session_id: str,
    payload: MaterialsAdd,
    current_actor: Actor = Depends(require_scheduler),
    lifecycle: SessionLifecycle = Depends(get_lifecycle),
) -> ClassSessionOut:
    return lifecycle.add_materials(session_id, payload.materials, actor_id=current_actor.id)


@router.delete("/{session_id}")
def delete_session(
    session_id: str,
    current_actor: Actor = Depends(require_scheduler),
    lifecycle: SessionLifecycle = Depends(get_lifecycle),
) -> dict:
    lifecycle.delete_session(session_id, actor_id=current_actor.id)
    return {"success": True}
