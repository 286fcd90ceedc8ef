"""Key-value record store on Redis."""

from cms.infrastructure.kv.client import create_redis_client
from cms.infrastructure.kv.record_store_redis import RedisRecordStore

__all__ = ["RedisRecordStore", "create_redis_client"]
