"""Redis client for two-factor challenge records.

JSON values with a per-key TTL. Every command is attempted once; a Redis
error (or a client that never connected) raises DependencyException so the
caller can tell an outage from a missing key.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import redis.asyncio as redis

from course_advising.core.config import Settings, get_settings
from course_advising.domain.exceptions import DependencyException

logger = logging.getLogger(__name__)


class RedisChallengeCache:
    """Async Redis wrapper used by RedisChallengeStore.

    Call connect() at startup and disconnect() at shutdown. connect() does
    not raise: if the ping fails the cache reports is_available() False and
    the application keeps challenges in memory instead.
    """

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.redis = redis_client
        self.settings = settings or get_settings()

    async def connect(self) -> None:
        if self.redis is not None:
            return
        client = redis.Redis(
            host=self.settings.redis_host,
            port=self.settings.redis_port,
            db=self.settings.redis_db,
            password=(
                self.settings.redis_password.get_secret_value()
                if self.settings.redis_password
                else None
            ),
            max_connections=self.settings.redis_max_connections,
            decode_responses=True,
            socket_connect_timeout=5,
        )
        try:
            await client.ping()
        except redis.RedisError as e:
            logger.warning("Redis connection failed: %s", e)
            await client.aclose()
            return
        self.redis = client
        logger.info(
            "Redis connected: %s:%s", self.settings.redis_host, self.settings.redis_port
        )

    async def disconnect(self) -> None:
        if self.redis is not None:
            await self.redis.aclose()
            self.redis = None
            logger.info("Redis disconnected")

    def is_available(self) -> bool:
        return self.redis is not None

    def _client(self) -> redis.Redis:
        if self.redis is None:
            raise DependencyException("redis")
        return self.redis

    async def get(self, key: str) -> Any | None:
        """Return the decoded value, or None when the key does not exist.

        Raises:
            DependencyException: Redis is unreachable or the command failed.
        """
        try:
            value = await self._client().get(key)
        except redis.RedisError:
            logger.exception("Redis GET failed for %s", key)
            raise DependencyException("redis")
        return json.loads(value) if value is not None else None

    async def set(self, key: str, value: Any, ttl: int) -> None:
        """Store value under key for ttl seconds.

        Raises:
            DependencyException: Redis is unreachable or the command failed.
        """
        try:
            await self._client().setex(key, ttl, json.dumps(value))
        except redis.RedisError:
            logger.exception("Redis SETEX failed for %s", key)
            raise DependencyException("redis")

    async def delete(self, key: str) -> None:
        """Remove key (absent keys are fine).

        Raises:
            DependencyException: Redis is unreachable or the command failed.
        """
        try:
            await self._client().delete(key)
        except redis.RedisError:
            logger.exception("Redis DEL failed for %s", key)
            raise DependencyException("redis")
