# app/core/catalog.py
from __future__ import annotations

import logging

from app.core.providers import GameRegistry

logger = logging.getLogger(__name__)

# Curved / spiral stairs share one category with the straight variant
EXCLUDED_STRUCTURE_PARTS = ("stairs.spiral", "stairs.u", "stairs.l")

# Sprites the host names differently from its prefab
SPRITE_CORRECTIONS = {
    "assets/prefabs/building core/wall.low/wall.low.png": "assets/prefabs/building core/wall.low/wall.third.png",
}


def prefab_to_sprite(prefab_name: str) -> str:
    sprite = prefab_name.replace(".prefab", ".png")
    return SPRITE_CORRECTIONS.get(sprite, sprite)


def is_excluded_structure(prefab_name: str) -> bool:
    return any(part in prefab_name for part in EXCLUDED_STRUCTURE_PARTS)


def build_catalog(registry: GameRegistry) -> dict[str, str]:
    """
    Map every quota-eligible category key to the prefab live objects carry.

    - deployable items: str(item_id) -> deployed prefab (first occurrence wins)
    - building blocks: sprite name -> prefab, minus the redundant stair variants
    """
    catalog: dict[str, str] = {}

    for item in registry.deployable_items():
        if not item.deploys_prefab:
            continue
        key = str(item.item_id)
        if key in catalog:
            continue
        catalog[key] = item.deploys_prefab

    for prefab in registry.structure_prefabs():
        if not prefab.is_building_block:
            continue
        if is_excluded_structure(prefab.prefab_name):
            continue
        catalog.setdefault(prefab_to_sprite(prefab.prefab_name), prefab.prefab_name)

    logger.debug("Catalog built with %d categories", len(catalog))
    return catalog
