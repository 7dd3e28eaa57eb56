from __future__ import annotations

from typing import Dict

from pydantic import BaseModel, Field, TypeAdapter

from app.core.tier_limits import LimitEntry, Tier


class LimitEntryDoc(BaseModel):
    icon: str = ""
    limit: int = Field(..., ge=0)
    enabled: bool = True


class TierDoc(BaseModel):
    priority: int = 0
    categories: Dict[str, LimitEntryDoc] = Field(default_factory=dict)


LimitsDocument = TypeAdapter(Dict[str, TierDoc])


def tiers_to_document(tiers: dict[str, Tier]) -> dict:
    """Serialise tiers as {name: {priority, categories: {key: {icon, limit, enabled}}}}."""
    doc = {
        name: TierDoc(
            priority=tier.priority,
            categories={
                key: LimitEntryDoc(icon=e.icon, limit=e.limit, enabled=e.enabled)
                for key, e in tier.categories.items()
            },
        )
        for name, tier in tiers.items()
    }
    return LimitsDocument.dump_python(doc, mode="json")


def tiers_from_document(payload: dict | None) -> dict[str, Tier]:
    doc = LimitsDocument.validate_python(payload or {})
    return {
        name: Tier(
            name=name,
            priority=t.priority,
            categories={
                key: LimitEntry(icon=e.icon, limit=e.limit, enabled=e.enabled)
                for key, e in t.categories.items()
            },
        )
        for name, t in doc.items()
    }
