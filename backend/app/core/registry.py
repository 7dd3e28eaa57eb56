# app/core/registry.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from pydantic import ValidationError

from app.core.providers import DeployableItem, StructurePrefab
from app.schemas.registry import ItemRecords, PrefabRecords

logger = logging.getLogger(__name__)

ITEMS_FILE = "items.json"
PREFABS_FILE = "prefabs.json"


class JsonGameRegistry:
    """
    Item / prefab registries exported by the host as JSON files.

    A missing or malformed file is logged and treated as an empty registry so
    that a partial export still yields the categories it does describe.
    """

    def __init__(self, directory: Path | str):
        self.directory = Path(directory)

    def _read(self, name: str) -> bytes | None:
        path = self.directory / name
        if not path.exists():
            logger.warning("Registry file %s not found", path)
            return None
        try:
            return path.read_bytes()
        except OSError as e:
            logger.error("Error reading registry file %s: %s", path, e)
            return None

    def deployable_items(self) -> Iterable[DeployableItem]:
        raw = self._read(ITEMS_FILE)
        if raw is None:
            return []
        try:
            records = ItemRecords.validate_json(raw)
        except ValidationError as e:
            logger.error("Invalid %s: %s", ITEMS_FILE, e)
            return []
        return [DeployableItem(item_id=r.item_id, deploys_prefab=r.deployable_prefab) for r in records]

    def structure_prefabs(self) -> Iterable[StructurePrefab]:
        raw = self._read(PREFABS_FILE)
        if raw is None:
            return []
        try:
            records = PrefabRecords.validate_json(raw)
        except ValidationError as e:
            logger.error("Invalid %s: %s", PREFABS_FILE, e)
            return []
        return [StructurePrefab(prefab_name=r.prefab_name, is_building_block=r.building_block) for r in records]
