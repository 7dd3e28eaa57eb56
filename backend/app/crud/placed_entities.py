# app/crud/placed_entities.py
from __future__ import annotations

from typing import Callable, Iterable

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from app.core.providers import LiveEntity
from app.models.placed_entity import PlacedEntity


def list_live_entities(db: Session) -> list[LiveEntity]:
    rows = db.execute(select(PlacedEntity.owner_id, PlacedEntity.prefab_name)).all()
    return [LiveEntity(owner_id=owner_id, prefab_name=prefab_name) for owner_id, prefab_name in rows]


def add_placed_entity(db: Session, owner_id: int, prefab_name: str) -> PlacedEntity:
    entity = PlacedEntity(owner_id=owner_id, prefab_name=prefab_name)
    db.add(entity)
    db.commit()
    return entity


def remove_placed_entity(db: Session, entity_id: int) -> bool:
    res = db.execute(delete(PlacedEntity).where(PlacedEntity.id == entity_id))
    db.commit()
    return bool(res.rowcount)


class SqlWorldState:
    """WorldStateProvider over the placed_entities table."""

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def iter_live_entities(self) -> Iterable[LiveEntity]:
        with self.session_factory() as db:
            return list_live_entities(db)
