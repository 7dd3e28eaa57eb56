# backend/app/models/placed_entity.py

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.db.base import Base


class PlacedEntity(Base):
    __tablename__ = "placed_entities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    owner_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)

    # Full prefab path, e.g. assets/prefabs/deployable/furnace/furnace.prefab
    prefab_name: Mapped[str] = mapped_column(String(255), nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
