# app/core/tier_store.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from threading import RLock
from typing import Callable, Optional

from app.core.errors import (
    CategoryNotFoundError,
    InvalidTierNameError,
    PersistenceError,
    TierAlreadyExistsError,
    TierNotFoundError,
)
from app.core.limits import DEFAULT_TIER_LIMITS, ITEMS_PER_PAGE, NEW_TIER_DEFAULT_LIMIT, REFRESH_DEFAULT_LIMIT
from app.core.providers import LimitRepository
from app.core.tier import TIER_PREFIX
from app.core.tier_limits import (
    LimitEntry,
    Tier,
    is_valid_tier_name,
    normalize_tier_name,
    seed_categories,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CategoryPage:
    items: list[tuple[str, LimitEntry]]
    offset: int
    limit: int
    total: int

    @property
    def has_more(self) -> bool:
        return self.offset + len(self.items) < self.total


class TierStore:
    """
    Named privilege tiers and their per-category limits.

    Every mutation is written through to the repository straight away and is
    rolled back when that write fails. Reads and writes share one lock so a
    refresh never exposes a half-merged map.
    """

    def __init__(self, repository: LimitRepository):
        self.repository = repository
        self._tiers: dict[str, Tier] = {}
        self._catalog: dict[str, str] = {}
        self._lock = RLock()

    # =====================
    # Lifecycle
    # =====================

    def load(self, catalog: Optional[dict[str, str]] = None) -> bool:
        """
        Load the persisted document. Synthesises and persists the default tiers,
        seeded from `catalog`, when it is empty. Returns True if defaults were created.
        """
        with self._lock:
            if catalog is not None:
                self._catalog = dict(catalog)
            self._tiers = dict(self.repository.load())
            if self._tiers:
                logger.info("Loaded %d limit tiers", len(self._tiers))
                return False

            for name, limit in DEFAULT_TIER_LIMITS.items():
                self._insert(name.value, seed_categories(self._catalog, limit))
            logger.warning("No limit tiers found; created defaults: %s", ", ".join(self._tiers))
            self._save_or_undo(self._tiers.clear)
            return True

    def save(self) -> None:
        with self._lock:
            try:
                self.repository.save(dict(self._tiers))
            except Exception as e:
                logger.exception("Failed to persist limit tiers")
                raise PersistenceError(f"Failed to persist limit tiers: {e}") from e

    def _save_or_undo(self, undo: Callable[[], None]) -> None:
        """Persist, or revert the in-memory change and re-raise if the write fails."""
        try:
            self.save()
        except PersistenceError:
            undo()
            raise

    # =====================
    # Reads
    # =====================

    @property
    def catalog(self) -> dict[str, str]:
        return dict(self._catalog)

    def get(self, name: str) -> Optional[Tier]:
        with self._lock:
            return self._tiers.get(name)

    def require(self, name: str) -> Tier:
        tier = self.get(name)
        if tier is None:
            raise TierNotFoundError(name)
        return tier

    def list_tiers(self) -> list[Tier]:
        with self._lock:
            return sorted(self._tiers.values(), key=lambda t: t.priority)

    def get_limit(self, tier: Tier, category: str) -> int:
        with self._lock:
            return tier.get_limit_for_category(category)

    def list_categories(
        self,
        name: str,
        search: str | None = None,
        offset: int = 0,
        limit: int = ITEMS_PER_PAGE,
    ) -> CategoryPage:
        """Page through a tier's categories, optionally filtered by a case-insensitive substring."""
        if offset < 0 or limit < 1:
            raise ValueError("offset must be >= 0 and limit >= 1")

        with self._lock:
            tier = self.require(name)
            items = list(tier.categories.items())

        needle = (search or "").strip().lower()
        if needle:
            items = [(k, v) for (k, v) in items if needle in k.lower()]

        return CategoryPage(
            items=items[offset : offset + limit],
            offset=offset,
            limit=limit,
            total=len(items),
        )

    # =====================
    # Mutations
    # =====================

    def _next_priority(self) -> int:
        if not self._tiers:
            return 0
        return max(t.priority for t in self._tiers.values()) + 1

    def _insert(self, name: str, categories: dict[str, LimitEntry]) -> Tier:
        tier = Tier(name=name, priority=self._next_priority(), categories=categories)
        self._tiers[name] = tier
        return tier

    def create_tier(self, name: str, default_limit: int = NEW_TIER_DEFAULT_LIMIT) -> Tier:
        name = normalize_tier_name(name)
        if not is_valid_tier_name(name):
            raise InvalidTierNameError(name, TIER_PREFIX)
        if default_limit < 0:
            raise ValueError("default_limit must be >= 0")

        with self._lock:
            if name in self._tiers:
                raise TierAlreadyExistsError(name)
            tier = self._insert(name, seed_categories(self._catalog, default_limit))
            self._save_or_undo(lambda: self._tiers.pop(name, None))

        logger.info("Created privilege %s (priority=%d)", name, tier.priority)
        return tier

    def clone_tier(self, name: str, source_name: str) -> Tier:
        name = normalize_tier_name(name)
        if not is_valid_tier_name(name):
            raise InvalidTierNameError(name, TIER_PREFIX)

        with self._lock:
            if name in self._tiers:
                raise TierAlreadyExistsError(name)
            source = self.require(source_name)
            tier = source.clone(name)
            self._tiers[name] = tier
            self._save_or_undo(lambda: self._tiers.pop(name, None))

        logger.info("Created privilege %s from %s (priority=%d)", name, source_name, tier.priority)
        return tier

    def _require_entry(self, name: str, category: str) -> LimitEntry:
        tier = self.require(name)
        entry = tier.categories.get(category)
        if entry is None:
            raise CategoryNotFoundError(name, category)
        return entry

    def set_category_enabled(self, name: str, category: str, enabled: bool) -> LimitEntry:
        with self._lock:
            entry = self._require_entry(name, category)
            previous = entry.enabled
            entry.enabled = enabled
            self._save_or_undo(lambda: setattr(entry, "enabled", previous))
        logger.info("%s: %s limited=%s", name, category, enabled)
        return entry

    def set_category_limit(self, name: str, category: str, limit: int) -> LimitEntry:
        if limit < 0:
            raise ValueError("limit must be >= 0")
        with self._lock:
            entry = self._require_entry(name, category)
            previous = entry.limit
            entry.limit = limit
            self._save_or_undo(lambda: setattr(entry, "limit", previous))
        logger.info("%s: %s limit=%d", name, category, limit)
        return entry

    def refresh_from_catalog(self, catalog: dict[str, str]) -> bool:
        """
        Additive merge of the catalog into every tier: unseen categories are
        added with the refresh default, existing entries are never touched.
        Persists and returns True if anything was added. A failed write removes
        the added entries again.
        """
        added: list[tuple[Tier, str]] = []
        with self._lock:
            previous_catalog = self._catalog
            self._catalog = dict(catalog)
            for tier in self._tiers.values():
                for icon, identifier in catalog.items():
                    if identifier in tier.categories:
                        continue
                    tier.categories[identifier] = LimitEntry(
                        icon=icon,
                        limit=REFRESH_DEFAULT_LIMIT,
                        enabled=True,
                    )
                    added.append((tier, identifier))

            def undo() -> None:
                self._catalog = previous_catalog
                for tier, identifier in added:
                    tier.categories.pop(identifier, None)

            if added:
                logger.warning("Limit data was updated from the entity catalog")
                self._save_or_undo(undo)

        return bool(added)
