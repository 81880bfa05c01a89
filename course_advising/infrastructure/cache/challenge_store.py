"""Stores for pending two-factor challenges.

One record per user id, last writer wins. Records are not swept in the
background: the verifier checks expiry and deletes stale records itself.
The Redis store also sets a key TTL so abandoned challenges disappear.
"""

from __future__ import annotations

import logging
from datetime import datetime

from course_advising.domain.entities.pending_challenge import PendingChallenge
from course_advising.infrastructure.cache.cache_protocol import CacheProtocol
from course_advising.infrastructure.cache.keys import challenge_key
from course_advising.shared.utils.datetime import ensure_utc, utc_now

logger = logging.getLogger(__name__)


class InMemoryChallengeStore:
    """Process-local challenge store. Contents are lost on restart.

    Each instance owns its own map, so tests and app instances are isolated.
    """

    backend = "memory"

    def __init__(self) -> None:
        self._challenges: dict[int, PendingChallenge] = {}

    async def put(self, user_id: int, challenge: PendingChallenge) -> None:
        self._challenges[user_id] = challenge

    async def get(self, user_id: int) -> PendingChallenge | None:
        return self._challenges.get(user_id)

    async def delete(self, user_id: int) -> None:
        self._challenges.pop(user_id, None)

    def __len__(self) -> int:
        return len(self._challenges)


class RedisChallengeStore:
    """Challenge store shared across processes, layered on RedisChallengeCache.

    Values are stored as {"code": str, "expires_at": ISO-8601}. Cache
    failures propagate as DependencyException: a code that could not be
    stored, read, or consumed must not be treated as absent or spent.
    """

    backend = "redis"

    def __init__(self, cache: CacheProtocol, *, min_ttl_seconds: int = 1) -> None:
        self._cache = cache
        self._min_ttl = min_ttl_seconds

    async def put(self, user_id: int, challenge: PendingChallenge) -> None:
        remaining = int((ensure_utc(challenge.expires_at) - utc_now()).total_seconds())
        await self._cache.set(
            challenge_key(user_id),
            {"code": challenge.code, "expires_at": challenge.expires_at.isoformat()},
            ttl=max(remaining, self._min_ttl),
        )

    async def get(self, user_id: int) -> PendingChallenge | None:
        raw = await self._cache.get(challenge_key(user_id))
        if raw is None:
            return None
        try:
            return PendingChallenge(
                code=str(raw["code"]),
                expires_at=datetime.fromisoformat(raw["expires_at"]),
            )
        except (KeyError, TypeError, ValueError):
            logger.warning("Discarding malformed challenge record for user %s", user_id)
            await self._cache.delete(challenge_key(user_id))
            return None

    async def delete(self, user_id: int) -> None:
        await self._cache.delete(challenge_key(user_id))
