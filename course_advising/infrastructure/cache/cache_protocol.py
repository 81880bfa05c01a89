"""Cache protocol for stores layered on a key-value cache (DIP)."""

from typing import Any, Protocol


class CacheProtocol(Protocol):
    """Key-value cache used by RedisChallengeStore.

    A missing key is None; a backend failure raises DependencyException.
    """

    def is_available(self) -> bool:
        ...

    async def get(self, key: str) -> Any:
        """Return the stored value or None when the key is absent."""
        ...

    async def set(self, key: str, value: Any, ttl: int) -> None:
        """Store value with a TTL in seconds."""
        ...

    async def delete(self, key: str) -> None:
        ...
