"""SQLAlchemy declarative base for all ORM models."""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import JSON


class Base(DeclarativeBase):
    """Base class for all database models."""


class CauldronSnapshotModel(Base):
    """ORM model for saved cauldron state.

    state: 솥 상태 + 투입 재료 + 현재 결과물 (PersistenceService 직렬화 형식)
    """

    __tablename__ = "cauldron_snapshots"

    slot: Mapped[str] = mapped_column(String, primary_key=True)
    state: Mapped[dict] = mapped_column(JSON, nullable=False)
    schema_version: Mapped[int] = mapped_column(Integer, default=1)
    saved_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
