"""Persisted record collections (one JSON array per collection name)."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from tess_backoffice.models.base import Base, TimestampMixin


class RecordCollection(Base, TimestampMixin):
    """A named collection serialized as a single JSON array.

    ``version`` increases by one on every successful write and serves as the
    optimistic concurrency token for conditional updates.
    """

    __tablename__ = "record_collection"

    name: Mapped[str] = mapped_column(String(64), primary_key=True)
    payload: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    __table_args__ = (
        CheckConstraint("version >= 0", name="record_collection_version_check"),
    )
