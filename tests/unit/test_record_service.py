"""RecordService unit tests with a mocked record store."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from cms.application.dtos.record import RecordPage
from cms.application.services.collection_registry import CollectionRegistry
from cms.application.use_cases.records import RecordService
from cms.domain.entities.collection import collection
from cms.domain.entities.record import RecordEntity
from cms.domain.exceptions import (
    HookFailedException,
    HookRejectedException,
    ResourceNotFoundException,
    ValidationException,
)

NOW = datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


def _add_slug(old, old_version, new_version):
    return {**old.data, "slug": old.data["title"].lower()}


def _registry(**hooks) -> CollectionRegistry:
    return CollectionRegistry(
        [
            collection(
                "posts",
                fields={
                    "title": {"type": "text", "required": True},
                    "slug": {"type": "text"},
                    "views": {"type": "number", "default": 0},
                },
                version=2,
                hooks={"new_version": _add_slug, **hooks},
            ),
            collection("settings", fields={"name": {"type": "text"}}, unique=True),
            collection("notes"),
        ]
    )


def _echo_insert(slug, record_id, data, version, now):
    return RecordEntity(
        id=record_id, collection=slug, data=data, version=version, created_at=now, updated_at=now
    )


@pytest.fixture
def store():
    store = AsyncMock()
    store.max_limit = 100
    store.insert = AsyncMock(side_effect=_echo_insert)
    store.update = AsyncMock(side_effect=_echo_insert)
    return store


def _service(store, registry=None) -> RecordService:
    return RecordService(
        registry or _registry(), store, clock=lambda: NOW, id_factory=lambda: "01NEW"
    )


async def test_create_applies_defaults_and_version(store) -> None:
    record = await _service(store).create_record("posts", {"title": "Hello"})
    assert record.id == "01NEW"
    assert record.data == {"title": "Hello", "views": 0}
    store.insert.assert_awaited_once_with(
        "posts", "01NEW", {"title": "Hello", "views": 0}, 2, NOW
    )


async def test_create_rejects_undeclared_field(store) -> None:
    with pytest.raises(ValidationException) as exc_info:
        await _service(store).create_record("posts", {"title": "a", "body": "x"})
    assert exc_info.value.details == {"field": "body"}
    store.insert.assert_not_called()


async def test_create_requires_required_fields(store) -> None:
    with pytest.raises(ValidationException):
        await _service(store).create_record("posts", {})
    store.insert.assert_not_called()


async def test_required_field_may_be_filled_by_before_create(store) -> None:
    service = _service(store, _registry(before_create=lambda d: {**d, "title": "auto"}))
    record = await service.create_record("posts", {})
    assert record.data["title"] == "auto"


async def test_schemaless_collection_accepts_any_keys(store) -> None:
    record = await _service(store).create_record("notes", {"anything": [1, 2]})
    assert record.data == {"anything": [1, 2]}


async def test_singleton_create_uses_fixed_id(store) -> None:
    record = await _service(store).create_record("settings", {"name": "x"})
    assert record.id == "unique"


async def test_unknown_collection_raises_not_found(store) -> None:
    with pytest.raises(ResourceNotFoundException):
        await _service(store).list_records("nope")
    store.list.assert_not_called()


async def test_before_create_rejection_writes_nothing(store) -> None:
    def reject(data):
        raise ValueError("nope")

    with pytest.raises(HookRejectedException):
        await _service(store, _registry(before_create=reject)).create_record("posts", {"title": "a"})
    store.insert.assert_not_called()


async def test_after_create_failure_keeps_write(store) -> None:
    def fail(record):
        raise RuntimeError("boom")

    with pytest.raises(HookFailedException) as exc_info:
        await _service(store, _registry(after_create=fail)).create_record("posts", {"title": "a"})
    assert exc_info.value.record_id == "01NEW"
    store.insert.assert_awaited_once()


async def test_update_migrates_stale_record(store) -> None:
    """Stale v1 record updated with {title: x} persists migrated data at v2."""
    store.get = AsyncMock(
        return_value=RecordEntity(id="R1", collection="posts", data={"title": "Old"}, version=1, created_at=NOW)
    )
    record = await _service(store).update_record("posts", "R1", {"title": "x"})
    store.update.assert_awaited_once_with(
        "posts", "R1", {"title": "x", "slug": "old"}, 2, NOW
    )
    assert record.version == 2


async def test_update_missing_record_runs_no_hooks(store) -> None:
    calls = []
    store.get = AsyncMock(side_effect=ResourceNotFoundException("record", "R1"))
    service = _service(store, _registry(before_update=lambda old, d: calls.append(d)))
    with pytest.raises(ResourceNotFoundException):
        await service.update_record("posts", "R1", {"title": "x"})
    assert calls == []
    store.update.assert_not_called()


async def test_singleton_update_ignores_supplied_id(store) -> None:
    store.get = AsyncMock(
        return_value=RecordEntity(id="unique", collection="settings", data={}, version=0)
    )
    await _service(store).update_record("settings", "whatever", {"name": "n"})
    store.get.assert_awaited_once_with("settings", "unique")


async def test_delete_soft_deletes(store) -> None:
    store.get = AsyncMock(
        return_value=RecordEntity(id="R1", collection="notes", data={}, version=0)
    )
    await _service(store).delete_record("notes", "R1")
    store.soft_delete.assert_awaited_once_with("notes", "R1", NOW)


async def test_delete_veto_writes_nothing(store) -> None:
    def veto(old):
        raise PermissionError("locked")

    store.get = AsyncMock(
        return_value=RecordEntity(id="R1", collection="posts", data={"title": "a"}, version=2)
    )
    with pytest.raises(HookRejectedException):
        await _service(store, _registry(before_delete=veto)).delete_record("posts", "R1")
    store.soft_delete.assert_not_called()


async def test_list_uses_default_and_clamped_limits(store) -> None:
    store.list = AsyncMock(return_value=RecordPage(records=[], cursor=None))
    service = _service(store)
    await service.list_records("posts")
    store.list.assert_awaited_with("posts", cursor=None, limit=10)
    await service.list_records("posts", cursor="C", limit=5000)
    store.list.assert_awaited_with("posts", cursor="C", limit=100)


async def test_list_rejects_non_positive_limit(store) -> None:
    with pytest.raises(ValidationException):
        await _service(store).list_records("posts", limit=0)


async def test_before_update_rejection_writes_nothing(store) -> None:
    def reject(old, data):
        raise ValueError("frozen")

    store.get = AsyncMock(
        return_value=RecordEntity(id="R1", collection="posts", data={"title": "a"}, version=2)
    )
    with pytest.raises(HookRejectedException):
        await _service(store, _registry(before_update=reject)).update_record("posts", "R1", {"title": "b"})
    store.update.assert_not_awaited()


async def test_after_update_failure_keeps_write(store) -> None:
    def fail(old, new):
        raise RuntimeError("boom")

    store.get = AsyncMock(
        return_value=RecordEntity(id="R1", collection="posts", data={"title": "a"}, version=2)
    )
    with pytest.raises(HookFailedException) as exc_info:
        await _service(store, _registry(after_update=fail)).update_record("posts", "R1", {"title": "b"})
    assert exc_info.value.record_id == "R1"
    store.update.assert_awaited_once()


async def test_after_delete_failure_keeps_delete(store) -> None:
    def fail(old):
        raise RuntimeError("boom")

    store.get = AsyncMock(
        return_value=RecordEntity(id="R1", collection="posts", data={"title": "a"}, version=2)
    )
    with pytest.raises(HookFailedException):
        await _service(store, _registry(after_delete=fail)).delete_record("posts", "R1")
    store.soft_delete.assert_awaited_once_with("posts", "R1", NOW)
