from __future__ import annotations

from typing import AbstractSet, Iterable, Optional

from app.core.providers import Authorizer
from app.core.tier_limits import Tier


def _by_priority(tiers: Iterable[Tier]) -> list[Tier]:
    # sorted() is stable: equal priorities keep creation order, so the later tier wins
    return sorted(tiers, key=lambda t: t.priority)


def resolve_tier(tiers: Iterable[Tier], granted: AbstractSet[str]) -> Optional[Tier]:
    """
    Resolve the single tier that applies to a holder of `granted` permissions.

    Walks tiers in ascending priority and keeps the last one granted, so the
    highest priority wins regardless of the order permissions were granted in.
    None means the user holds no tier and every quota-gated action is denied.
    """
    resolved: Optional[Tier] = None
    for tier in _by_priority(tiers):
        if tier.name in granted:
            resolved = tier
    return resolved


def resolve_tier_for_user(tiers: Iterable[Tier], authorizer: Authorizer, user_id: int) -> Optional[Tier]:
    """Same as resolve_tier, asking the host's authorizer tier by tier."""
    resolved: Optional[Tier] = None
    for tier in _by_priority(tiers):
        if authorizer.has_capability(user_id, tier.name):
            resolved = tier
    return resolved
