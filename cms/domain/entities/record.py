"""Record domain entity: one payload stored in one collection."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class RecordEntity:
    """A stored record. ``(collection, id)`` never changes after creation.

    ``deleted_at`` set means soft-deleted: readers must treat the record as
    absent. ``version`` is the collection schema version the payload was
    written under.
    """

    id: str
    collection: str
    data: dict[str, Any] = field(default_factory=dict)
    version: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def is_stale(self, current_version: int) -> bool:
        """Return True if the payload predates the collection's declared version."""
        return self.version < current_version
