"""Key-value record store (implements IRecordStore) on Redis.

Each record is one Redis hash at ``{prefix}records/{slug}/{id}``:

    data  JSON payload
    meta  JSON metadata side-channel: version, createdAt, updatedAt, deletedAt

Listing uses SCAN over the collection's key prefix; the page cursor is
Redis's own scan cursor, so page order is whatever the keyspace yields and
only a cursor from this store resumes a listing. A soft delete rewrites the
entry with deletedAt set and an expiry, after which Redis reclaims the key.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from typing import Any

import redis.asyncio as redis

from cms.application.dtos.record import RecordPage
from cms.domain.entities.record import RecordEntity
from cms.domain.exceptions import (
    RecordConflictException,
    ResourceNotFoundException,
    StorageException,
    ValidationException,
)
from cms.shared.utils.datetime import format_utc, parse_utc

logger = logging.getLogger(__name__)

DEFAULT_MAX_LIMIT = 1000
DEFAULT_DELETED_TTL_SECONDS = 30 * 24 * 60 * 60

_GLOB_SPECIAL = re.compile(r"([*?\[\]\\])")


def _escape_glob(value: str) -> str:
    """Escape characters SCAN MATCH would treat as wildcards."""
    return _GLOB_SPECIAL.sub(r"\\\1", value)


@contextmanager
def _storage_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except redis.RedisError as e:
        logger.exception("Redis record store %s failed", operation)
        raise StorageException(operation, str(e)) from e


class RedisRecordStore:
    """Record store over a Redis key namespace with a metadata side-channel."""

    def __init__(
        self,
        client: redis.Redis,
        *,
        key_prefix: str = "",
        deleted_ttl_seconds: int = DEFAULT_DELETED_TTL_SECONDS,
        max_limit: int = DEFAULT_MAX_LIMIT,
    ) -> None:
        self.redis = client
        self.key_prefix = key_prefix
        self.deleted_ttl_seconds = deleted_ttl_seconds
        self.max_limit = max_limit

    def _collection_prefix(self, slug: str) -> str:
        return f"{self.key_prefix}records/{slug}/"

    def _key(self, slug: str, record_id: str) -> str:
        return f"{self._collection_prefix(slug)}{record_id}"

    @staticmethod
    def _to_entity(
        slug: str, record_id: str, data: str | None, meta: str | None
    ) -> RecordEntity | None:
        if meta is None:
            return None
        m: dict[str, Any] = json.loads(meta)
        return RecordEntity(
            id=record_id,
            collection=slug,
            data=json.loads(data) if data else {},
            version=int(m.get("version", 0)),
            created_at=parse_utc(m.get("createdAt")),
            updated_at=parse_utc(m.get("updatedAt")),
            deleted_at=parse_utc(m.get("deletedAt")),
        )

    @staticmethod
    def _meta(record: RecordEntity) -> str:
        return json.dumps(
            {
                "version": record.version,
                "createdAt": format_utc(record.created_at),
                "updatedAt": format_utc(record.updated_at),
                "deletedAt": format_utc(record.deleted_at),
            }
        )

    async def _read(self, slug: str, record_id: str) -> RecordEntity | None:
        data, meta = await self.redis.hmget(self._key(slug, record_id), ["data", "meta"])
        return self._to_entity(slug, record_id, data, meta)

    async def _write(self, record: RecordEntity, *, expire: int | None = None) -> None:
        """Rewrite value and metadata together; expire=None clears any retention TTL."""
        key = self._key(record.collection, record.id)
        async with self.redis.pipeline(transaction=True) as pipe:
            pipe.hset(
                key,
                mapping={"data": json.dumps(record.data), "meta": self._meta(record)},
            )
            if expire is None:
                pipe.persist(key)
            else:
                pipe.expire(key, expire)
            await pipe.execute()

    async def get(self, slug: str, record_id: str) -> RecordEntity:
        """Return the live record; soft-deleted entries are reported as not found."""
        with _storage_errors("get"):
            record = await self._read(slug, record_id)
        if record is None or record.is_deleted:
            raise ResourceNotFoundException("record", record_id)
        return record

    async def inspect(self, slug: str, record_id: str) -> RecordEntity | None:
        """Return the entry as stored (soft-deleted included) until Redis reclaims it."""
        with _storage_errors("inspect"):
            return await self._read(slug, record_id)

    async def list(
        self, slug: str, cursor: str | None = None, limit: int = 10
    ) -> RecordPage:
        """Return live records from one or more SCAN steps and Redis's next cursor.

        SCAN's COUNT is a hint: a page may hold somewhat more or fewer than
        ``limit`` records (soft-deleted entries are dropped after the scan).
        Batches are never truncated, so resuming from the cursor loses nothing.
        """
        limit = max(1, min(limit, self.max_limit))
        try:
            scan_cursor = int(cursor) if cursor else 0
        except ValueError:
            raise ValidationException("Invalid cursor", field="cursor") from None
        prefix = self._collection_prefix(slug)
        pattern = f"{_escape_glob(prefix)}*"
        records: list[RecordEntity] = []
        seen: set[str] = set()
        with _storage_errors("list"):
            while True:
                scan_cursor, keys = await self.redis.scan(
                    cursor=scan_cursor, match=pattern, count=limit - len(records)
                )
                batch = [k for k in keys if k not in seen]
                seen.update(batch)
                if batch:
                    async with self.redis.pipeline(transaction=False) as pipe:
                        for key in batch:
                            pipe.hmget(key, ["data", "meta"])
                        values = await pipe.execute()
                    for key, (data, meta) in zip(batch, values):
                        record = self._to_entity(slug, key[len(prefix):], data, meta)
                        if record is not None and not record.is_deleted:
                            records.append(record)
                if scan_cursor == 0 or len(records) >= limit:
                    break
        records.sort(key=lambda r: r.id)
        return RecordPage(
            records=records, cursor=str(scan_cursor) if scan_cursor != 0 else None
        )

    async def insert(
        self,
        slug: str,
        record_id: str,
        data: dict[str, Any],
        version: int,
        now: datetime,
    ) -> RecordEntity:
        """Write a new entry; a soft-deleted entry at the key is overwritten.

        Raises:
            RecordConflictException: A live entry already holds the key.
        """
        record = RecordEntity(
            id=record_id,
            collection=slug,
            data=data,
            version=version,
            created_at=now,
            updated_at=now,
        )
        with _storage_errors("insert"):
            existing = await self._read(slug, record_id)
            if existing is not None and not existing.is_deleted:
                raise RecordConflictException(slug, record_id)
            await self._write(record)
        return record

    async def update(
        self,
        slug: str,
        record_id: str,
        data: dict[str, Any],
        version: int,
        now: datetime,
    ) -> RecordEntity:
        """Rewrite data and metadata of a live entry; createdAt is preserved."""
        with _storage_errors("update"):
            existing = await self._read(slug, record_id)
            if existing is None or existing.is_deleted:
                raise ResourceNotFoundException("record", record_id)
            record = RecordEntity(
                id=record_id,
                collection=slug,
                data=data,
                version=version,
                created_at=existing.created_at,
                updated_at=now,
            )
            await self._write(record)
        return record

    async def soft_delete(self, slug: str, record_id: str, now: datetime) -> None:
        """Rewrite the entry with deletedAt set and the retention TTL."""
        with _storage_errors("soft_delete"):
            existing = await self._read(slug, record_id)
            if existing is None or existing.is_deleted:
                raise ResourceNotFoundException("record", record_id)
            deleted = RecordEntity(
                id=existing.id,
                collection=slug,
                data=existing.data,
                version=existing.version,
                created_at=existing.created_at,
                updated_at=existing.updated_at,
                deleted_at=now,
            )
            await self._write(deleted, expire=self.deleted_ttl_seconds)
