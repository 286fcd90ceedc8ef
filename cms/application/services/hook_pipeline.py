"""Hook pipeline: runs a collection's lifecycle callbacks around each mutation.

Invocation order is fixed for every collection:

    create: before_create -> write -> after_create
    update: new_version (stale records only) -> merge delta -> before_update
            -> write -> after_update
    delete: before_delete -> write -> after_delete

A failure before the write aborts the operation with HookRejectedException
and nothing is persisted. A failure after the write raises
HookFailedException; the write stands.
"""

from __future__ import annotations

import copy
import inspect
import logging
from collections.abc import Mapping
from dataclasses import replace
from typing import Any

from cms.domain.entities.collection import CollectionConfig, HookFn
from cms.domain.entities.record import RecordEntity
from cms.domain.exceptions import HookFailedException, HookRejectedException

logger = logging.getLogger(__name__)


def _snapshot(record: RecordEntity) -> RecordEntity:
    """Copy handed to hooks so in-place edits never reach the caller's record."""
    return replace(record, data=copy.deepcopy(record.data))


async def _call(fn: HookFn, *args: Any) -> Any:
    result = fn(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


class HookPipeline:
    """Lifecycle callbacks of one collection, invoked in a fixed order."""

    def __init__(self, collection: CollectionConfig) -> None:
        self.collection = collection
        self.hooks = collection.hooks

    async def _run_pre(self, name: str, fn: HookFn, *args: Any) -> Any:
        try:
            return await _call(fn, *args)
        except HookRejectedException:
            raise
        except Exception as e:
            logger.warning(
                "%s hook rejected operation on %s: %s", name, self.collection.slug, e
            )
            raise HookRejectedException(self.collection.slug, name, str(e)) from e

    async def _run_post(self, name: str, fn: HookFn, record_id: str, *args: Any) -> None:
        try:
            await _call(fn, *args)
        except Exception as e:
            logger.exception(
                "%s hook failed on %s/%s after commit", name, self.collection.slug, record_id
            )
            raise HookFailedException(self.collection.slug, name, record_id, str(e)) from e

    def _payload(self, name: str, result: Any, working: dict[str, Any]) -> dict[str, Any]:
        """A hook may return a new payload or None (keep the possibly mutated copy)."""
        if result is None:
            return working
        if not isinstance(result, Mapping):
            raise HookRejectedException(
                self.collection.slug,
                name,
                f"returned {type(result).__name__}, expected a mapping",
            )
        return dict(result)

    async def prepare_create(self, data: dict[str, Any]) -> dict[str, Any]:
        """Run before_create; return the payload to persist."""
        working = copy.deepcopy(data)
        if self.hooks.before_create is None:
            return working
        result = await self._run_pre("before_create", self.hooks.before_create, working)
        return self._payload("before_create", result, working)

    async def created(self, record: RecordEntity) -> None:
        if self.hooks.after_create is not None:
            await self._run_post(
                "after_create", self.hooks.after_create, record.id, _snapshot(record)
            )

    async def migrate(self, old: RecordEntity) -> dict[str, Any]:
        """Return old's payload, migrated to the collection's version when stale.

        Only runs new_version when the stored version is behind and the hook
        is declared; otherwise returns a copy of the stored payload. The hook
        sees a record whose data is the working payload, so in-place edits
        count as the migration when it returns None.
        """
        working = copy.deepcopy(old.data)
        if self.hooks.new_version is None or not old.is_stale(self.collection.version):
            return working
        logger.debug(
            "Migrating %s/%s from version %d to %d",
            self.collection.slug,
            old.id,
            old.version,
            self.collection.version,
        )
        snapshot = replace(old, data=working)
        result = await self._run_pre(
            "new_version",
            self.hooks.new_version,
            snapshot,
            old.version,
            self.collection.version,
        )
        return self._payload("new_version", result, snapshot.data)

    async def prepare_update(
        self, old: RecordEntity, delta: dict[str, Any]
    ) -> dict[str, Any]:
        """Migrate, apply the caller's delta, then run before_update.

        before_update receives the migrated-and-merged payload, never the
        stale one. Its return value is what gets persisted.
        """
        working = await self.migrate(old)
        working.update(copy.deepcopy(delta))
        if self.hooks.before_update is None:
            return working
        result = await self._run_pre(
            "before_update", self.hooks.before_update, _snapshot(old), working
        )
        return self._payload("before_update", result, working)

    async def updated(self, old: RecordEntity, new: RecordEntity) -> None:
        if self.hooks.after_update is not None:
            await self._run_post(
                "after_update",
                self.hooks.after_update,
                new.id,
                _snapshot(old),
                _snapshot(new),
            )

    async def prepare_delete(self, old: RecordEntity) -> None:
        """Run before_delete; raising from the hook vetoes the delete."""
        if self.hooks.before_delete is not None:
            await self._run_pre("before_delete", self.hooks.before_delete, _snapshot(old))

    async def deleted(self, old: RecordEntity) -> None:
        if self.hooks.after_delete is not None:
            await self._run_post(
                "after_delete", self.hooks.after_delete, old.id, _snapshot(old)
            )
