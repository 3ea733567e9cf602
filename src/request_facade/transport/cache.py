"""In-memory response caching transport.

``CachingTransport`` keeps successful responses of cacheable methods (GET by
default) for ``max_age`` seconds, keyed on method and full URL. Identical
requests issued while a fetch is still in flight share that fetch, so the
wrapped transport is called once.

Caching can be switched per request through request extensions:

```python
import httpx

from request_facade.transport.cache import CacheOptions, CachingTransport

transport = CachingTransport(
    wrapped_transport=httpx.AsyncHTTPTransport(),
    options=CacheOptions(max_age=60, enabled_by_default=False),
)

async with httpx.AsyncClient(transport=transport) as client:
    # Opt in for this call only
    await client.get("https://api.example.com/items", extensions={"cache": True})

    # Bypass and refresh the stored entry
    await client.get("https://api.example.com/items", extensions={"cache": True, "force_update": True})
```

At most ``max_entries`` responses are kept. Expired entries are purged when a
new one is stored, and the least recently used entry is evicted when the
cache is full.
"""

import asyncio
import logging
import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass
from functools import partial

import httpx

logger = logging.getLogger(__name__)

# Request extension forcing a refetch of a cached entry
FORCE_UPDATE_EXTENSION = "force_update"

# Response extension set on responses served from cache
FROM_CACHE_EXTENSION = "from_cache"

# Headers describing the wire encoding of the original body, which no longer
# apply once the decoded body is stored
_ENCODING_HEADERS = frozenset(["content-encoding", "transfer-encoding", "content-length"])


@dataclass(frozen=True)
class CacheOptions:
    """Configuration of CachingTransport.

    Attributes:
        max_age: Seconds a cached response stays valid (default: 300)
        enabled_by_default: Cache requests that do not set the cache flag (default: True)
        cache_flag: Request extension that turns caching on or off per call (default: "cache")
        methods: Methods whose responses may be cached (default: GET)
        max_entries: Maximum number of cached responses, least recently used
            evicted first (default: 100)
    """

    max_age: float = 300.0
    enabled_by_default: bool = True
    cache_flag: str = "cache"
    methods: frozenset[str] = frozenset(["GET"])
    max_entries: int = 100


@dataclass(frozen=True)
class _StoredResponse:
    status_code: int
    headers: list[tuple[str, str]]
    content: bytes

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    def to_response(self, *, from_cache: bool) -> httpx.Response:
        return httpx.Response(
            self.status_code,
            headers=self.headers,
            content=self.content,
            extensions={FROM_CACHE_EXTENSION: from_cache},
        )


@dataclass
class _CacheEntry:
    task: "asyncio.Future[_StoredResponse]"
    expires_at: float = 0.0


class CachingTransport(httpx.AsyncBaseTransport):
    """Transport that serves repeated cacheable requests from memory.

    Args:
        wrapped_transport: The underlying transport to wrap
        options: Cache configuration (default: ``CacheOptions()``)
        clock: Monotonic clock returning seconds (default: ``time.monotonic``)
    """

    def __init__(
        self,
        *,
        wrapped_transport: httpx.AsyncBaseTransport,
        options: CacheOptions | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._wrapped_transport = wrapped_transport
        self.options = options or CacheOptions()
        self._clock = clock
        self._entries: OrderedDict[str, _CacheEntry] = OrderedDict()

    async def aclose(self) -> None:
        """Close the wrapped transport."""
        await self._wrapped_transport.aclose()

    @property
    def entry_count(self) -> int:
        """Number of responses currently held, including in-flight fetches."""
        return len(self._entries)

    def clear(self) -> None:
        """Drop every cached response."""
        self._entries.clear()

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        """Answer from cache when possible, otherwise fetch and store.

        Args:
            request: The HTTP request to send

        Returns:
            HTTP response, with ``extensions["from_cache"]`` telling where it came from
        """
        if not self._is_cacheable(request):
            return await self._wrapped_transport.handle_async_request(request)

        key = self._cache_key(request)
        now = self._clock()
        entry = self._entries.get(key)

        if entry is not None and not request.extensions.get(FORCE_UPDATE_EXTENSION, False):
            if entry.expires_at > now:
                logger.debug(f"Cache hit for {request.method} {request.url}")
                self._entries.move_to_end(key)
                stored = await asyncio.shield(entry.task)
                return stored.to_response(from_cache=True)

            logger.debug(f"Cache entry expired for {request.method} {request.url}")
            del self._entries[key]

        logger.debug(f"Cache miss for {request.method} {request.url}")
        task = asyncio.ensure_future(self._fetch(request))
        entry = _CacheEntry(task=task, expires_at=now + self.options.max_age)
        self._store(key, entry, now)
        task.add_done_callback(partial(self._on_fetch_done, key, entry))

        stored = await asyncio.shield(task)
        return stored.to_response(from_cache=False)

    def _is_cacheable(self, request: httpx.Request) -> bool:
        if request.method not in self.options.methods:
            return False
        return bool(request.extensions.get(self.options.cache_flag, self.options.enabled_by_default))

    def _store(self, key: str, entry: _CacheEntry, now: float) -> None:
        self._entries.pop(key, None)
        expired = [name for name, stored in self._entries.items() if stored.expires_at <= now]
        for name in expired:
            del self._entries[name]

        while self._entries and len(self._entries) >= self.options.max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug(f"Cache full, evicting {evicted}")

        self._entries[key] = entry

    def _cache_key(self, request: httpx.Request) -> str:
        return f"{request.method} {request.url}"

    async def _fetch(self, request: httpx.Request) -> _StoredResponse:
        response = await self._wrapped_transport.handle_async_request(request)
        try:
            content = await response.aread()
        finally:
            await response.aclose()

        headers = [
            (name, value)
            for name, value in response.headers.multi_items()
            if name.lower() not in _ENCODING_HEADERS
        ]
        return _StoredResponse(status_code=response.status_code, headers=headers, content=content)

    def _on_fetch_done(self, key: str, entry: _CacheEntry, task: "asyncio.Future[_StoredResponse]") -> None:
        """Forget entries whose fetch failed or did not succeed."""
        if task.cancelled() or task.exception() is not None or not task.result().is_success:
            if self._entries.get(key) is entry:
                del self._entries[key]
