from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Iterable, Optional

Loader = Callable[[], Awaitable[Any]]


class ICacheStore(ABC):
    """Key-value cache with TTL.

    Implementations are best-effort: a failing backend turns reads into
    misses and writes into no-ops, it never raises to the caller.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        pass

    @abstractmethod
    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        pass

    @abstractmethod
    async def delete(self, key: str) -> None:
        pass

    @abstractmethod
    async def delete_many(self, keys: Iterable[str]) -> None:
        pass

    @abstractmethod
    async def delete_pattern(self, pattern: str) -> int:
        """Delete every key matching a glob pattern. Returns the number removed."""
        pass

    @abstractmethod
    async def exists(self, key: str) -> bool:
        pass

    @abstractmethod
    async def ping(self) -> bool:
        pass

    async def get_or_load(self, key: str, loader: Loader, ttl: Optional[int] = None) -> Any:
        """
        Cache-aside read.

        Returns the cached value when present, otherwise awaits loader and
        caches its result unless it is None. Loader errors propagate.
        """
        cached = await self.get(key)
        if cached is not None:
            return cached

        value = await loader()
        if value is not None:
            await self.set(key, value, ttl)
        return value
