from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, TypeAdapter


class ItemRecord(BaseModel):
    item_id: int = Field(..., alias="itemid")
    shortname: Optional[str] = None
    deployable_prefab: Optional[str] = Field(default=None, min_length=1)

    model_config = {"populate_by_name": True}


class PrefabRecord(BaseModel):
    prefab_name: str = Field(..., min_length=1)
    building_block: bool = False


ItemRecords = TypeAdapter(List[ItemRecord])
PrefabRecords = TypeAdapter(List[PrefabRecord])
