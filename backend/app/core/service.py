# app/core/service.py
from __future__ import annotations

import logging
from typing import Optional

from app.core.catalog import build_catalog
from app.core.config import Settings
from app.core.enforcer import QuotaDecision, QuotaEnforcer
from app.core.groups import GroupAggregator
from app.core.limits import ITEMS_PER_PAGE, NEW_TIER_DEFAULT_LIMIT
from app.core.providers import (
    Authorizer,
    GameRegistry,
    LimitRepository,
    PluginHost,
    TeamProvider,
    WorldStateProvider,
)
from app.core.tier_limits import LimitEntry, Tier
from app.core.tier_store import CategoryPage, TierStore
from app.core.usage import UsageCounter

logger = logging.getLogger(__name__)


class EntityLimitService:
    """
    Entry point used by the API / command layer.

    Built once at startup and handed to whoever needs it; `start()` loads the
    limit document and `shutdown()` writes it back.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        repository: LimitRepository,
        registry: GameRegistry,
        authorizer: Authorizer,
        world: WorldStateProvider,
        teams: Optional[TeamProvider] = None,
        plugin_host: Optional[PluginHost] = None,
    ):
        self.settings = settings
        self.registry = registry
        self.authorizer = authorizer

        self.store = TierStore(repository)
        self.groups = GroupAggregator(
            teams,
            plugin_host,
            use_teams=settings.USE_TEAM_POOLING,
            use_clans=settings.USE_CLAN_POOLING,
            clan_provider=settings.CLAN_PROVIDER,
        )
        self.counter = UsageCounter(world, warning_ms=settings.SCAN_WARNING_MS)
        self.enforcer = QuotaEnforcer(self.store, authorizer, self.groups, self.counter)
        self.started = False

    # -----------------------------
    # Lifecycle
    # -----------------------------
    def start(self) -> None:
        catalog = build_catalog(self.registry)
        self.store.load(catalog)
        if self.settings.AUTO_FILL_ENTITIES:
            self.store.refresh_from_catalog(catalog)
        self.started = True
        logger.info("Entity limit service started (%d tiers, %d categories)", len(self.store.list_tiers()), len(catalog))

    def shutdown(self) -> None:
        if not self.started:
            return
        self.store.save()
        self.started = False
        logger.info("Entity limit service stopped")

    def save(self) -> None:
        """Host-driven periodic save."""
        self.store.save()

    # -----------------------------
    # Enforcement
    # -----------------------------
    def evaluate(self, user_id: int, category: Optional[str]) -> QuotaDecision:
        return self.enforcer.evaluate(user_id, category)

    def limit_message(self, decision: QuotaDecision) -> Optional[str]:
        """Chat feedback for a denied placement; None when the placement is allowed."""
        if decision.allowed:
            return None
        return self.settings.MESSAGE_PREFIX + self.settings.LIMIT_REACHED_MESSAGE.replace("{0}", str(decision.limit))

    def usage_snapshot(self, user_id: int, category: str) -> tuple[int, int]:
        return self.enforcer.usage_snapshot(user_id, category)

    # -----------------------------
    # Administration
    # -----------------------------
    def create_tier(self, name: str, copy_from: Optional[str] = None) -> Tier:
        if copy_from:
            return self.store.clone_tier(name, copy_from)
        return self.store.create_tier(name, NEW_TIER_DEFAULT_LIMIT)

    def set_category_enabled(self, tier_name: str, category: str, enabled: bool) -> LimitEntry:
        return self.store.set_category_enabled(tier_name, category, enabled)

    def set_category_limit(self, tier_name: str, category: str, limit: int) -> LimitEntry:
        return self.store.set_category_limit(tier_name, category, limit)

    def list_tiers(self) -> list[Tier]:
        return self.store.list_tiers()

    def list_categories(
        self,
        tier_name: str,
        search: Optional[str] = None,
        offset: int = 0,
        limit: int = ITEMS_PER_PAGE,
    ) -> CategoryPage:
        return self.store.list_categories(tier_name, search, offset, limit)

    def refresh_catalog(self) -> bool:
        return self.store.refresh_from_catalog(build_catalog(self.registry))
