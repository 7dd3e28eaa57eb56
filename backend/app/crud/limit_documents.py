# app/crud/limit_documents.py
from __future__ import annotations

from typing import Callable

from sqlalchemy.orm import Session

from app.core.tier_limits import Tier
from app.models.limit_document import LimitDocument
from app.schemas.limits_document import tiers_from_document, tiers_to_document

LIMITS_KEY = "limits"


def read_document(db: Session, key: str = LIMITS_KEY) -> dict | None:
    doc = db.get(LimitDocument, key)
    return doc.payload if doc is not None else None


def write_document(db: Session, payload: dict, key: str = LIMITS_KEY) -> None:
    """Overwrite the whole document in one transaction."""
    doc = db.get(LimitDocument, key)
    if doc is None:
        db.add(LimitDocument(key=key, payload=payload))
    else:
        doc.payload = payload
    db.commit()


class SqlLimitRepository:
    """LimitRepository storing the tier document as one JSON row."""

    def __init__(self, session_factory: Callable[[], Session], key: str = LIMITS_KEY):
        self.session_factory = session_factory
        self.key = key

    def load(self) -> dict[str, Tier]:
        with self.session_factory() as db:
            return tiers_from_document(read_document(db, self.key))

    def save(self, tiers: dict[str, Tier]) -> None:
        payload = tiers_to_document(tiers)
        with self.session_factory() as db:
            write_document(db, payload, self.key)
