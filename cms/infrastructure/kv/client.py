"""Redis connection for the key-value record store.

Built once per process (lifespan or first request) from settings and shared
by every request; redis.asyncio pools connections internally.
"""

from __future__ import annotations

import logging

import redis.asyncio as redis

from cms.core.config import Settings

logger = logging.getLogger(__name__)


def create_redis_client(settings: Settings) -> redis.Redis:
    """Return an async Redis client (decode_responses=True) for settings.

    REDIS_URL takes precedence over host/port/db/password.
    """
    if settings.redis_url:
        client = redis.Redis.from_url(
            settings.redis_url,
            decode_responses=True,
            max_connections=settings.redis_max_connections,
        )
        logger.info("Redis record store configured from REDIS_URL")
        return client
    client = redis.Redis(
        host=settings.redis_host,
        port=settings.redis_port,
        db=settings.redis_db,
        password=(
            settings.redis_password.get_secret_value()
            if settings.redis_password
            else None
        ),
        decode_responses=True,
        socket_connect_timeout=5,
        socket_keepalive=True,
        max_connections=settings.redis_max_connections,
    )
    logger.info(
        "Redis record store configured: %s:%s/%s",
        settings.redis_host,
        settings.redis_port,
        settings.redis_db,
    )
    return client
