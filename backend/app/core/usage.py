# app/core/usage.py
from __future__ import annotations

import logging
import time
from typing import AbstractSet

from app.core.providers import WorldStateProvider

logger = logging.getLogger(__name__)

DEFAULT_SCAN_WARNING_MS = 100


class UsageCounter:
    """
    Counts live placed objects of one category owned by a set of users.

    Every call is a full scan of the live world: objects are created and
    destroyed outside this service between calls, so counts are never cached.
    """

    def __init__(self, world: WorldStateProvider, warning_ms: int = DEFAULT_SCAN_WARNING_MS):
        self.world = world
        self.warning_ms = warning_ms

    def count(self, user_ids: AbstractSet[int], category: str) -> int:
        started = time.perf_counter()

        count = 0
        for entity in self.world.iter_live_entities():
            if entity.owner_id in user_ids and entity.prefab_name == category:
                count += 1

        elapsed_ms = (time.perf_counter() - started) * 1000
        if elapsed_ms > self.warning_ms:
            logger.warning("[UsageCounter.count] => Time - %.0fms (category=%s, owners=%d)", elapsed_ms, category, len(user_ids))

        return count

    def count_for_user(self, user_id: int, category: str) -> int:
        return self.count({user_id}, category)
