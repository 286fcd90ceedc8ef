"""RecordStoreFactory backend selection."""

from cms.core.config import Settings
from cms.infrastructure.kv import RedisRecordStore
from cms.infrastructure.persistence.repositories import SqlRecordStore
from cms.infrastructure.record_store_factory import RecordStoreFactory


def test_sql_backend() -> None:
    settings = Settings(record_backend="sql", database_url="sqlite+aiosqlite://", secret_key="s")
    store = RecordStoreFactory.create_record_store(settings)
    assert isinstance(store, SqlRecordStore)
    assert store.max_limit == 100


async def test_kv_backend() -> None:
    settings = Settings(
        record_backend="kv",
        redis_url="redis://localhost:6379/0",
        kv_key_prefix="site:",
        kv_deleted_ttl_days=1,
        secret_key="s",
    )
    store = RecordStoreFactory.create_record_store(settings)
    assert isinstance(store, RedisRecordStore)
    assert store.key_prefix == "site:"
    assert store.deleted_ttl_seconds == 86400
    assert store.max_limit == 1000
    await store.redis.aclose()
