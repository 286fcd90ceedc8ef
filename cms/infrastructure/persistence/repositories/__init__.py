"""SQL repository implementations."""

from cms.infrastructure.persistence.repositories.record_repo import SqlRecordStore

__all__ = ["SqlRecordStore"]
