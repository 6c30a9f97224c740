from fastapi import APIRouter, Depends

from app.api.deps import get_current_actor, get_detector
from app.core.security import Actor
from app.schemas.conflict import ConflictCheckRequest, ConflictProposal, ConflictReport
from app.services.conflict_detector import ConflictDetector

router = APIRouter()


@router.post("/check", response_model=ConflictReport)
def check_conflicts(
    payload: ConflictCheckRequest,
    current_actor: Actor = Depends(get_current_actor),
    detector: ConflictDetector = Depends(get_detector),
) -> ConflictReport:
    proposal = ConflictProposal.model_validate(payload.model_dump(exclude={"exclude_id", "exclude_kind"}))
    return detector.check_all_conflicts(proposal, exclude_id=payload.exclude_id, exclude_kind=payload.exclude_kind)
