"""Cache: Redis client, key utilities, and two-factor challenge stores.

Key format is in keys.py (DRY).
"""

from course_advising.infrastructure.cache.cache_protocol import CacheProtocol
from course_advising.infrastructure.cache.challenge_store import (
    InMemoryChallengeStore,
    RedisChallengeStore,
)
from course_advising.infrastructure.cache.keys import challenge_key
from course_advising.infrastructure.cache.redis_cache import RedisChallengeCache

__all__ = [
    "CacheProtocol",
    "InMemoryChallengeStore",
    "RedisChallengeCache",
    "RedisChallengeStore",
    "challenge_key",
]
