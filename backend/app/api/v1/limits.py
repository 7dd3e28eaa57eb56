from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from app.api.deps.permissions import require_action
from app.api.deps.service import get_limit_service
from app.auth.permissions import ActionType
from app.core.service import EntityLimitService
from app.schemas.limits import EvaluateRequest, EvaluateResponse, UsageResponse

router = APIRouter(prefix="/limits", tags=["limits"])


@router.post("/evaluate", response_model=EvaluateResponse)
def evaluate_placement(
    payload: EvaluateRequest,
    service: EntityLimitService = Depends(get_limit_service),
    _=Depends(require_action(ActionType.OPEN_UI)),
):
    """
    Called by the host (console token) on every placement attempt and on UI refresh.
    A denial is a normal 200 response with allowed=false; the host cancels the
    placement and shows `message` to the player.
    """
    decision = service.evaluate(payload.user_id, payload.category)
    return EvaluateResponse(
        **decision.to_dict(),
        message=service.limit_message(decision),
    )


@router.get("/usage/{user_id}", response_model=UsageResponse)
def get_usage(
    user_id: int,
    category: str = Query(..., min_length=1),
    service: EntityLimitService = Depends(get_limit_service),
    _=Depends(require_action(ActionType.OPEN_UI)),
):
    """Placed/limit counter shown to the player after a placement."""
    placed, limit = service.usage_snapshot(user_id, category)
    return UsageResponse(user_id=user_id, category=category, placed=placed, limit=limit)
