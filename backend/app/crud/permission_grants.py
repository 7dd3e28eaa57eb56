# app/crud/permission_grants.py
from __future__ import annotations

from typing import Callable

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.models.permission_grant import PermissionGrant


def has_permission(db: Session, user_id: int, permission: str) -> bool:
    stmt = (
        select(func.count(PermissionGrant.id))
        .where(PermissionGrant.user_id == user_id)
        .where(PermissionGrant.permission == permission)
    )
    return int(db.execute(stmt).scalar() or 0) > 0


def list_permissions(db: Session, user_id: int) -> set[str]:
    stmt = select(PermissionGrant.permission).where(PermissionGrant.user_id == user_id)
    return set(db.execute(stmt).scalars().all())


def grant_permission(db: Session, user_id: int, permission: str) -> None:
    if has_permission(db, user_id, permission):
        return
    db.add(PermissionGrant(user_id=user_id, permission=permission))
    db.commit()


class SqlAuthorizer:
    """Authorizer backed by the permission_grants table."""

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def has_capability(self, user_id: int, capability: str) -> bool:
        with self.session_factory() as db:
            return has_permission(db, user_id, capability)
