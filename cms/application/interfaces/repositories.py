"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
Every operation is scoped to exactly one record; no implementation offers
cross-record transactions.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from datetime import datetime

    from cms.application.dtos.record import RecordPage
    from cms.domain.entities.record import RecordEntity


class IRecordStore(Protocol):
    """Protocol for record storage (ordered table or key-value namespace).

    Soft-deleted records are invisible to get/list/update/soft_delete, which
    raise ResourceNotFoundException for them. Backend failures raise
    StorageException.
    """

    max_limit: int

    async def get(self, slug: str, record_id: str) -> RecordEntity:
        """Return the live record at (slug, record_id)."""

    async def inspect(self, slug: str, record_id: str) -> RecordEntity | None:
        """Return the record even if soft-deleted (diagnostics); None if never written."""

    async def list(
        self, slug: str, cursor: str | None = None, limit: int = 10
    ) -> RecordPage:
        """Return one page of live records and the store's continuation cursor."""

    async def insert(
        self,
        slug: str,
        record_id: str,
        data: dict[str, Any],
        version: int,
        now: datetime,
    ) -> RecordEntity:
        """Insert a record; RecordConflictException if a live record holds the key."""

    async def update(
        self,
        slug: str,
        record_id: str,
        data: dict[str, Any],
        version: int,
        now: datetime,
    ) -> RecordEntity:
        """Replace payload and version of a live record; created_at is preserved."""

    async def soft_delete(self, slug: str, record_id: str, now: datetime) -> None:
        """Mark a live record deleted (sets deleted_at)."""
