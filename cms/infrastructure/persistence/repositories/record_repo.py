"""Ordered-table record store (implements IRecordStore) on SQLAlchemy.

All collections share the ``record`` table. Listing walks ids in ascending
order, so the cursor is simply the last id returned. Each operation opens
its own short session and commits on its own: a committed write is never
undone by a later failure in the same request (e.g. an after-hook).
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from cms.application.dtos.record import RecordPage
from cms.domain.entities.record import RecordEntity
from cms.domain.exceptions import (
    RecordConflictException,
    ResourceNotFoundException,
    StorageException,
)
from cms.infrastructure.persistence.models.record import Record
from cms.shared.utils.datetime import ensure_utc

logger = logging.getLogger(__name__)

DEFAULT_MAX_LIMIT = 100


def _to_entity(row: Record) -> RecordEntity:
    return RecordEntity(
        id=row.id,
        collection=row.collection,
        data=dict(row.data or {}),
        version=row.version,
        created_at=ensure_utc(row.created_at),
        updated_at=ensure_utc(row.updated_at),
        deleted_at=ensure_utc(row.deleted_at),
    )


class SqlRecordStore:
    """Record store over one relational table, ordered by id within a collection."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        max_limit: int = DEFAULT_MAX_LIMIT,
    ) -> None:
        self._sessions = session_factory
        self.max_limit = max_limit

    @asynccontextmanager
    async def _session(self, operation: str, *, write: bool = False) -> AsyncIterator[AsyncSession]:
        """Yield a session (in a transaction when write=True); map driver errors to StorageException."""
        try:
            async with self._sessions() as session:
                if write:
                    async with session.begin():
                        yield session
                else:
                    yield session
        except IntegrityError:
            raise
        except SQLAlchemyError as e:
            logger.exception("SQL record store %s failed", operation)
            raise StorageException(operation, str(e)) from e

    @staticmethod
    async def _fetch(session: AsyncSession, slug: str, record_id: str) -> Record | None:
        result = await session.execute(
            select(Record).where(Record.collection == slug, Record.id == record_id)
        )
        return result.scalar_one_or_none()

    async def get(self, slug: str, record_id: str) -> RecordEntity:
        """Return the live record; soft-deleted rows are reported as not found."""
        async with self._session("get") as session:
            row = await self._fetch(session, slug, record_id)
            if row is None or row.deleted_at is not None:
                raise ResourceNotFoundException("record", record_id)
            return _to_entity(row)

    async def inspect(self, slug: str, record_id: str) -> RecordEntity | None:
        """Return the row as stored, including soft-deleted rows."""
        async with self._session("inspect") as session:
            row = await self._fetch(session, slug, record_id)
            return _to_entity(row) if row is not None else None

    async def list(
        self, slug: str, cursor: str | None = None, limit: int = 10
    ) -> RecordPage:
        """Return live records with id > cursor in ascending id order.

        The next cursor is the last id of a full page; a short page ends the listing.
        """
        limit = max(1, min(limit, self.max_limit))
        stmt = select(Record).where(
            Record.collection == slug, Record.deleted_at.is_(None)
        )
        if cursor:
            stmt = stmt.where(Record.id > cursor)
        stmt = stmt.order_by(Record.id.asc()).limit(limit)
        async with self._session("list") as session:
            rows = list((await session.execute(stmt)).scalars().all())
        next_cursor = rows[-1].id if len(rows) == limit else None
        return RecordPage(records=[_to_entity(r) for r in rows], cursor=next_cursor)

    async def insert(
        self,
        slug: str,
        record_id: str,
        data: dict[str, Any],
        version: int,
        now: datetime,
    ) -> RecordEntity:
        """Insert a row; a soft-deleted row at the same key is replaced in place.

        Raises:
            RecordConflictException: A live row already holds (slug, record_id).
        """
        try:
            async with self._session("insert", write=True) as session:
                row = await self._fetch(session, slug, record_id)
                if row is not None and row.deleted_at is None:
                    raise RecordConflictException(slug, record_id)
                if row is None:
                    row = Record(collection=slug, id=record_id)
                    session.add(row)
                row.data = data
                row.version = version
                row.created_at = now
                row.updated_at = now
                row.deleted_at = None
                await session.flush()
                return _to_entity(row)
        except IntegrityError:
            raise RecordConflictException(slug, record_id) from None

    async def update(
        self,
        slug: str,
        record_id: str,
        data: dict[str, Any],
        version: int,
        now: datetime,
    ) -> RecordEntity:
        """Replace data and version of a live row; created_at is preserved."""
        async with self._session("update", write=True) as session:
            row = await self._fetch(session, slug, record_id)
            if row is None or row.deleted_at is not None:
                raise ResourceNotFoundException("record", record_id)
            row.data = data
            row.version = version
            row.updated_at = now
            await session.flush()
            return _to_entity(row)

    async def soft_delete(self, slug: str, record_id: str, now: datetime) -> None:
        """UPDATE ... SET deleted_at = now on the live row; NotFound if none."""
        stmt = (
            update(Record)
            .where(
                Record.collection == slug,
                Record.id == record_id,
                Record.deleted_at.is_(None),
            )
            .values(deleted_at=now)
        )
        async with self._session("soft_delete", write=True) as session:
            result = await session.execute(stmt)
            if result.rowcount == 0:
                raise ResourceNotFoundException("record", record_id)
