from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from app.core.tier import TIER_PREFIX


class TierCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=128, description=f"Must start with '{TIER_PREFIX}'")
    copy_from: Optional[str] = Field(default=None, max_length=128, description="Existing privilege to copy limits from")

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return v.strip()

    @field_validator("copy_from")
    @classmethod
    def blank_copy_from_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None


class TierOut(BaseModel):
    name: str
    priority: int
    category_count: int


class CategoryOut(BaseModel):
    category: str
    icon: str
    limit: int
    enabled: bool


class CategoryPageOut(BaseModel):
    tier: str
    items: List[CategoryOut]
    offset: int
    limit: int
    total: int
    has_more: bool


class SetCategoryEnabled(BaseModel):
    category: str = Field(..., min_length=1)
    enabled: bool


class SetCategoryLimit(BaseModel):
    category: str = Field(..., min_length=1)
    limit: int = Field(..., ge=0)


class RefreshOut(BaseModel):
    changed: bool
