# app/crud/team_membership.py
from __future__ import annotations

from typing import Callable, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.team_membership import TeamMembership


def get_team_members(db: Session, user_id: int) -> Optional[list[int]]:
    """
    Members of the user's team (the user included), or None when the user has no team.
    """
    team_id = db.execute(
        select(TeamMembership.team_id).where(TeamMembership.user_id == user_id)
    ).scalar_one_or_none()
    if team_id is None:
        return None

    stmt = select(TeamMembership.user_id).where(TeamMembership.team_id == team_id)
    return [int(uid) for uid in db.execute(stmt).scalars().all()]


class SqlTeamProvider:
    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def team_members(self, user_id: int) -> Optional[list[int]]:
        with self.session_factory() as db:
            return get_team_members(db, user_id)
