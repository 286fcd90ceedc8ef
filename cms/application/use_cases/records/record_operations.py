"""Record operations: list, get, create, update, delete for any collection.

Composes the collection registry, the hook pipeline and a record store.
Access control runs before these methods are called (see
cms.api.v1.dependencies); nothing here re-checks roles.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any

from cms.application.dtos.record import RecordPage
from cms.application.interfaces.repositories import IRecordStore
from cms.application.services.collection_registry import CollectionRegistry
from cms.application.services.hook_pipeline import HookPipeline
from cms.domain.entities.collection import CollectionConfig
from cms.domain.entities.record import RecordEntity
from cms.domain.enums import SINGLETON_RECORD_ID
from cms.domain.exceptions import ValidationException
from cms.shared.utils.datetime import utc_now
from cms.shared.utils.generators import generate_ulid

logger = logging.getLogger(__name__)

DEFAULT_LIST_LIMIT = 10


def _check_declared(collection: CollectionConfig, data: dict[str, Any]) -> None:
    """Reject payload keys the collection does not declare (schemaless collections accept any)."""
    if collection.is_schemaless:
        return
    for key in data:
        if key not in collection.fields:
            raise ValidationException(
                f"Field {key!r} is not declared on collection {collection.slug!r}",
                field=key,
            )


def _apply_defaults(collection: CollectionConfig, data: dict[str, Any]) -> dict[str, Any]:
    out = dict(data)
    for name, spec in collection.fields.items():
        if name not in out and spec.has_default():
            out[name] = spec.default_value()
    return out


def _check_required(collection: CollectionConfig, data: dict[str, Any]) -> None:
    for name, spec in collection.fields.items():
        if spec.required and data.get(name) is None:
            raise ValidationException(f"Field {name!r} is required", field=name)


class RecordService:
    """The five record operations, independent of the backing store."""

    def __init__(
        self,
        registry: CollectionRegistry,
        store: IRecordStore,
        *,
        default_limit: int = DEFAULT_LIST_LIMIT,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = generate_ulid,
    ) -> None:
        self.registry = registry
        self.store = store
        self.default_limit = default_limit
        self.clock = clock
        self.id_factory = id_factory

    def _record_id(self, collection: CollectionConfig, record_id: str | None) -> str:
        """Singleton collections always address the fixed id; the supplied one is ignored."""
        if collection.unique:
            return SINGLETON_RECORD_ID
        if not record_id:
            raise ValidationException("Record id is required", field="id")
        return record_id

    def _limit(self, limit: int | None) -> int:
        if limit is None:
            limit = self.default_limit
        if limit < 1:
            raise ValidationException("limit must be at least 1", field="limit")
        return min(limit, self.store.max_limit)

    async def list_records(
        self, slug: str, cursor: str | None = None, limit: int | None = None
    ) -> RecordPage:
        """Return one page of live records; follow ``cursor`` for the next page."""
        collection = self.registry.lookup(slug)
        return await self.store.list(collection.slug, cursor=cursor or None, limit=self._limit(limit))

    async def get_record(self, slug: str, record_id: str | None) -> RecordEntity:
        """Return a live record; soft-deleted records are reported as not found."""
        collection = self.registry.lookup(slug)
        return await self.store.get(collection.slug, self._record_id(collection, record_id))

    async def create_record(self, slug: str, data: dict[str, Any]) -> RecordEntity:
        """Create a record at the collection's current version.

        Raises:
            ValidationException: Undeclared or missing required field.
            HookRejectedException: before_create failed; nothing written.
            RecordConflictException: Singleton collection already has a live record.
            HookFailedException: after_create failed; the record exists.
        """
        collection = self.registry.lookup(slug)
        _check_declared(collection, data)
        pipeline = HookPipeline(collection)
        payload = await pipeline.prepare_create(_apply_defaults(collection, data))
        _check_required(collection, payload)
        record_id = SINGLETON_RECORD_ID if collection.unique else self.id_factory()
        record = await self.store.insert(
            collection.slug, record_id, payload, collection.version, self.clock()
        )
        logger.info("Created record %s/%s", collection.slug, record.id)
        await pipeline.created(record)
        return record

    async def update_record(
        self, slug: str, record_id: str | None, data: dict[str, Any]
    ) -> RecordEntity:
        """Apply a partial update, migrating stale payloads first.

        The record is always written at the collection's declared version;
        created_at is preserved. Concurrent updates to the same record may
        lose one writer's changes (read and write are not atomic).

        Raises:
            ResourceNotFoundException: No live record; no hook runs.
            ValidationException: Undeclared or missing required field.
            HookRejectedException: new_version or before_update failed; nothing written.
            HookFailedException: after_update failed; the update stands.
        """
        collection = self.registry.lookup(slug)
        key = self._record_id(collection, record_id)
        old = await self.store.get(collection.slug, key)
        _check_declared(collection, data)
        pipeline = HookPipeline(collection)
        payload = await pipeline.prepare_update(old, data)
        _check_required(collection, payload)
        record = await self.store.update(
            collection.slug, key, payload, collection.version, self.clock()
        )
        logger.info(
            "Updated record %s/%s (version %d -> %d)",
            collection.slug,
            key,
            old.version,
            record.version,
        )
        await pipeline.updated(old, record)
        return record

    async def delete_record(self, slug: str, record_id: str | None) -> None:
        """Soft-delete a live record. Deleting an already-deleted record is NotFound.

        Raises:
            ResourceNotFoundException: No live record; no hook runs.
            HookRejectedException: before_delete vetoed; nothing written.
            HookFailedException: after_delete failed; the delete stands.
        """
        collection = self.registry.lookup(slug)
        key = self._record_id(collection, record_id)
        old = await self.store.get(collection.slug, key)
        pipeline = HookPipeline(collection)
        await pipeline.prepare_delete(old)
        await self.store.soft_delete(collection.slug, key, self.clock())
        logger.info("Deleted record %s/%s", collection.slug, key)
        await pipeline.deleted(old)
