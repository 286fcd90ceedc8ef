"""Record ORM model. One global table for the records of every collection."""

from typing import Any

from sqlalchemy import JSON, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from cms.infrastructure.persistence.database import Base
from cms.infrastructure.persistence.models.mixins import SoftDeleteMixin, TimestampMixin


class Record(TimestampMixin, SoftDeleteMixin, Base):
    """Record row. Table: record. Primary key: (collection, id).

    The composite key lets every singleton collection use the same fixed id.
    Listing walks the primary key in id order within one collection.
    """

    __tablename__ = "record"

    collection: Mapped[str] = mapped_column(String(128), primary_key=True)
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    data: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        Index("ix_record_collection_deleted_at", "collection", "deleted_at"),
    )
