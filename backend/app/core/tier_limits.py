# ============================
# FILE: app/core/tier_limits.py
# Tier / per-category limit model
# ============================
from __future__ import annotations

import copy
from dataclasses import dataclass, field

from app.core.limits import UNLIMITED
from app.core.tier import TIER_PREFIX


@dataclass
class LimitEntry:
    icon: str
    limit: int
    enabled: bool = True


@dataclass
class Tier:
    name: str
    priority: int
    categories: dict[str, LimitEntry] = field(default_factory=dict)

    def get_limit_for_category(self, category: str) -> int:
        """
        Returns the stored limit for the category, or UNLIMITED when the category
        is unknown to this tier or its quota is switched off.
        """
        entry = self.categories.get(category)
        if entry is None or not entry.enabled:
            return UNLIMITED
        return entry.limit

    def clone(self, name: str) -> "Tier":
        """
        New tier ranked directly above this one, starting from an independent
        copy of its categories.
        """
        return Tier(
            name=name,
            priority=self.priority + 1,
            categories=copy.deepcopy(self.categories),
        )


def normalize_tier_name(value: str | None) -> str:
    return (value or "").strip()


def is_valid_tier_name(value: str | None) -> bool:
    """
    Tier names double as permission identifiers, so they must live under the
    plugin's permission namespace.
    """
    return normalize_tier_name(value).startswith(TIER_PREFIX)


def seed_categories(catalog: dict[str, str], limit: int) -> dict[str, LimitEntry]:
    """
    Category map for a new tier: one enabled entry per catalog identifier, keyed
    by the identifier, the catalog key kept as icon. First key wins.
    """
    entries: dict[str, LimitEntry] = {}
    for icon, identifier in catalog.items():
        if identifier in entries:
            continue
        entries[identifier] = LimitEntry(icon=icon, limit=limit, enabled=True)
    return entries
