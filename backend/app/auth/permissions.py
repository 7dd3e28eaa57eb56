from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Mapping

from app.core.providers import Authorizer
from app.core.tier import TIER_PREFIX


@dataclass(frozen=True)
class Permission:
    UI: str = f"{TIER_PREFIX}.ui"
    SET_LIMIT: str = f"{TIER_PREFIX}.setlimit"
    CREATE_PERMISSION: str = f"{TIER_PREFIX}.createpermission"

    # grants every action
    ADMIN: str = f"{TIER_PREFIX}.admin"


PERM = Permission()


class ActionType(str, enum.Enum):
    OPEN_UI = "open_ui"
    SET_LIMIT = "set_limit"
    CREATE_PERMISSION = "create_permission"


ACTION_PERMISSIONS: Mapping[ActionType, str] = {
    ActionType.OPEN_UI: PERM.UI,
    ActionType.SET_LIMIT: PERM.SET_LIMIT,
    ActionType.CREATE_PERMISSION: PERM.CREATE_PERMISSION,
}


def can_use_action(authorizer: Authorizer, user_id: int | None, action: ActionType) -> bool:
    """
    The server console (no user) may do anything; ADMIN holders may do anything;
    everyone else needs the action's own permission.
    """
    if user_id is None:
        return True
    if authorizer.has_capability(user_id, PERM.ADMIN):
        return True
    return authorizer.has_capability(user_id, ACTION_PERMISSIONS[action])
