from __future__ import annotations

from typing import Callable, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials

from app.api.deps.service import get_limit_service
from app.auth.permissions import ACTION_PERMISSIONS, PERM, ActionType, can_use_action
from app.core.security import bearer_scheme, decode_access_token
from app.core.service import EntityLimitService


def get_current_operator(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
) -> Optional[int]:
    """Operator player id from the bearer token; None means the server console."""
    return decode_access_token(credentials.credentials)


def require_action(action: ActionType) -> Callable:
    """
    Enforce the operator may perform `action`:
      - the console may do anything
      - ADMIN permission grants every action
      - otherwise the action's own permission is required
    """

    def _checker(
        operator_id: Optional[int] = Depends(get_current_operator),
        service: EntityLimitService = Depends(get_limit_service),
    ) -> Optional[int]:
        if not can_use_action(service.authorizer, operator_id, action):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail={
                    "code": "action_forbidden",
                    "message": "You cant use this command",
                    "required": [ACTION_PERMISSIONS[action], PERM.ADMIN],
                    "action": action.value,
                },
            )
        return operator_id

    return _checker
