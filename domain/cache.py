import time
from typing import Awaitable, Callable, Generic, TypeVar

from cachetools import TTLCache


CACHE_TTL = 60 * 5

_KEY = "value"

T = TypeVar("T")


class CachedResource(Generic[T]):
    """A single value loaded on demand and kept for ``ttl`` seconds.

    The value is stale once ``timer() - fetched_at >= ttl``. A load that
    raises leaves the previous state untouched.
    """

    def __init__(
        self,
        load: Callable[[], Awaitable[T]],
        *,
        ttl: float = CACHE_TTL,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        self.load = load
        self.timer = timer
        self._cache: TTLCache[str, tuple[float, T]] = TTLCache(
            maxsize=1, ttl=ttl, timer=timer
        )

    @property
    def fetched_at(self) -> float | None:
        entry = self._cache.get(_KEY)
        return None if entry is None else entry[0]

    async def get(self) -> T:
        entry = self._cache.get(_KEY)
        if entry is not None:
            return entry[1]
        value = await self.load()
        self._cache[_KEY] = (self.timer(), value)
        return value

    def invalidate(self) -> None:
        self._cache.clear()
