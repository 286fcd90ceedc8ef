"""Record store factory: creates the SQL or Redis backend from settings."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from cms.application.interfaces.repositories import IRecordStore

if TYPE_CHECKING:
    from cms.core.config import Settings

logger = logging.getLogger(__name__)


class RecordStoreFactory:
    """Factory for record store instances based on configuration."""

    @staticmethod
    def create_record_store(settings: "Settings | None" = None) -> IRecordStore:
        """Create the record store from settings.

        Args:
            settings: Application settings; if None, uses get_settings().

        Returns:
            SqlRecordStore or RedisRecordStore.

        Raises:
            ValueError: Unknown backend.
        """
        from cms.core.config import get_settings

        s = settings or get_settings()
        backend = s.record_backend.lower()

        if backend == "sql":
            from cms.infrastructure.persistence.database import get_session_factory
            from cms.infrastructure.persistence.repositories import SqlRecordStore

            logger.info("Using ordered-table record store")
            return SqlRecordStore(get_session_factory(), max_limit=s.sql_list_max_limit)
        if backend == "kv":
            from cms.infrastructure.kv import RedisRecordStore, create_redis_client

            logger.info("Using key-value record store")
            return RedisRecordStore(
                create_redis_client(s),
                key_prefix=s.kv_key_prefix,
                deleted_ttl_seconds=s.kv_deleted_ttl_seconds,
                max_limit=s.kv_list_max_limit,
            )
        raise ValueError(
            f"Unknown record backend: {backend}. Supported: 'sql', 'kv'"
        )
