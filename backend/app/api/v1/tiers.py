from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from app.api.deps.permissions import require_action
from app.api.deps.service import get_limit_service
from app.api.errors import to_http_exception
from app.auth.permissions import ActionType
from app.core.errors import EntityLimitError
from app.core.limits import ITEMS_PER_PAGE
from app.core.service import EntityLimitService
from app.core.tier_limits import Tier
from app.schemas.tier import (
    CategoryOut,
    CategoryPageOut,
    RefreshOut,
    SetCategoryEnabled,
    SetCategoryLimit,
    TierCreate,
    TierOut,
)

router = APIRouter(prefix="/tiers", tags=["tiers"])


def _tier_out(tier: Tier) -> TierOut:
    return TierOut(name=tier.name, priority=tier.priority, category_count=len(tier.categories))


# =========================================================
# READ (OPEN_UI)
# =========================================================
@router.get("", response_model=List[TierOut])
def list_tiers(
    service: EntityLimitService = Depends(get_limit_service),
    _=Depends(require_action(ActionType.OPEN_UI)),
):
    return [_tier_out(t) for t in service.list_tiers()]


@router.get("/{tier_name}/categories", response_model=CategoryPageOut)
def list_categories(
    tier_name: str,
    search: Optional[str] = Query(default=None, max_length=60),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=ITEMS_PER_PAGE, ge=1, le=500),
    service: EntityLimitService = Depends(get_limit_service),
    _=Depends(require_action(ActionType.OPEN_UI)),
):
    try:
        page = service.list_categories(tier_name, search, offset, limit)
    except EntityLimitError as e:
        raise to_http_exception(e)

    return CategoryPageOut(
        tier=tier_name,
        items=[
            CategoryOut(category=key, icon=e.icon, limit=e.limit, enabled=e.enabled)
            for key, e in page.items
        ],
        offset=page.offset,
        limit=page.limit,
        total=page.total,
        has_more=page.has_more,
    )


# =========================================================
# CREATE (CREATE_PERMISSION)
# =========================================================
@router.post("", response_model=TierOut, status_code=status.HTTP_201_CREATED)
def create_tier(
    payload: TierCreate,
    service: EntityLimitService = Depends(get_limit_service),
    _=Depends(require_action(ActionType.CREATE_PERMISSION)),
):
    """
    Create a privilege. With `copy_from`, the new privilege starts from an
    independent copy of that privilege's limits and ranks directly above it.
    """
    try:
        tier = service.create_tier(payload.name, payload.copy_from)
    except EntityLimitError as e:
        raise to_http_exception(e)
    return _tier_out(tier)


# =========================================================
# EDIT (SET_LIMIT)
# =========================================================
@router.patch("/{tier_name}/categories/enabled", response_model=CategoryOut)
def set_category_enabled(
    tier_name: str,
    payload: SetCategoryEnabled,
    service: EntityLimitService = Depends(get_limit_service),
    _=Depends(require_action(ActionType.SET_LIMIT)),
):
    try:
        entry = service.set_category_enabled(tier_name, payload.category, payload.enabled)
    except EntityLimitError as e:
        raise to_http_exception(e)
    return CategoryOut(category=payload.category, icon=entry.icon, limit=entry.limit, enabled=entry.enabled)


@router.patch("/{tier_name}/categories/limit", response_model=CategoryOut)
def set_category_limit(
    tier_name: str,
    payload: SetCategoryLimit,
    service: EntityLimitService = Depends(get_limit_service),
    _=Depends(require_action(ActionType.SET_LIMIT)),
):
    try:
        entry = service.set_category_limit(tier_name, payload.category, payload.limit)
    except EntityLimitError as e:
        raise to_http_exception(e)
    return CategoryOut(category=payload.category, icon=entry.icon, limit=entry.limit, enabled=entry.enabled)


@router.post("/refresh", response_model=RefreshOut)
def refresh_catalog(
    service: EntityLimitService = Depends(get_limit_service),
    _=Depends(require_action(ActionType.SET_LIMIT)),
):
    """Merge newly discovered entities into every privilege (existing limits are kept)."""
    try:
        changed = service.refresh_catalog()
    except EntityLimitError as e:
        raise to_http_exception(e)
    return RefreshOut(changed=changed)


@router.post("/save", status_code=status.HTTP_204_NO_CONTENT)
def save_limits(
    service: EntityLimitService = Depends(get_limit_service),
    _=Depends(require_action(ActionType.SET_LIMIT)),
):
    """Host-driven save signal."""
    try:
        service.save()
    except EntityLimitError as e:
        raise to_http_exception(e)
    return None
