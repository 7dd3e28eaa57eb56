from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class EvaluateRequest(BaseModel):
    user_id: int = Field(..., ge=0)
    category: Optional[str] = Field(default=None, description="Prefab path of the object being placed")


class EvaluateResponse(BaseModel):
    allowed: bool
    limit: int
    current_count: int
    reason: str
    tier: Optional[str] = None
    message: Optional[str] = None


class UsageResponse(BaseModel):
    user_id: int
    category: str
    placed: int
    limit: int
