# app/core/enforcer.py
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Optional

from app.core.groups import GroupAggregator
from app.core.limits import UNLIMITED
from app.core.providers import Authorizer
from app.core.tier_resolver import resolve_tier_for_user
from app.core.tier_store import TierStore
from app.core.usage import UsageCounter

logger = logging.getLogger(__name__)

# Placement without a tier is logged this many times so it stands out in the console
NO_TIER_LOG_REPEAT = 3

REASON_UNTRACKED = "untracked"
REASON_NO_TIER = "no_tier"
REASON_UNLIMITED = "unlimited"
REASON_WITHIN_LIMIT = "within_limit"
REASON_LIMIT_REACHED = "limit_reached"


@dataclass(frozen=True)
class QuotaDecision:
    """Outcome of one placement check. A denial is a normal result, not an error."""

    allowed: bool
    limit: int
    current_count: int
    reason: str
    tier: Optional[str] = None

    @property
    def is_unlimited(self) -> bool:
        return self.limit == UNLIMITED

    def to_dict(self) -> dict:
        return asdict(self)


class QuotaEnforcer:
    def __init__(
        self,
        store: TierStore,
        authorizer: Authorizer,
        groups: GroupAggregator,
        counter: UsageCounter,
    ):
        self.store = store
        self.authorizer = authorizer
        self.groups = groups
        self.counter = counter

    def evaluate(self, user_id: int, category: Optional[str]) -> QuotaDecision:
        """
        Decide whether `user_id` may place one more object of `category`.

        1. untracked (empty) categories are always allowed
        2. no tier -> denied
        3. unlimited / disabled category -> allowed without counting
        4. otherwise allowed iff pooled live count < limit
        """
        if not category:
            return QuotaDecision(allowed=True, limit=0, current_count=0, reason=REASON_UNTRACKED)

        tier = resolve_tier_for_user(self.store.list_tiers(), self.authorizer, user_id)
        if tier is None:
            for _ in range(NO_TIER_LOG_REPEAT):
                logger.error("Player %s doesn't have any limit privilege! They can't build.", user_id)
            return QuotaDecision(allowed=False, limit=UNLIMITED, current_count=0, reason=REASON_NO_TIER)

        limit = self.store.get_limit(tier, category)
        if limit == UNLIMITED:
            return QuotaDecision(
                allowed=True,
                limit=UNLIMITED,
                current_count=0,
                reason=REASON_UNLIMITED,
                tier=tier.name,
            )

        pool = self.groups.resolve_pool(user_id)
        count = self.counter.count(pool, category)
        allowed = count < limit

        logger.debug("Quota check: user=%s category=%s tier=%s %d/%d", user_id, category, tier.name, count, limit)
        return QuotaDecision(
            allowed=allowed,
            limit=limit,
            current_count=count,
            reason=REASON_WITHIN_LIMIT if allowed else REASON_LIMIT_REACHED,
            tier=tier.name,
        )

    def usage_snapshot(self, user_id: int, category: str) -> tuple[int, int]:
        """
        (placed, limit) shown to the player after a placement. Counts only the
        player's own objects; an unlimited category reports a limit of 0.
        """
        tier = resolve_tier_for_user(self.store.list_tiers(), self.authorizer, user_id)
        if tier is None:
            return 0, 0

        limit = self.store.get_limit(tier, category)
        if limit == UNLIMITED:
            limit = 0
        return self.counter.count_for_user(user_id, category), limit
