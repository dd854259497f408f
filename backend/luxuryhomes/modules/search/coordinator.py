"""
Fetch cache and coordinator for listing searches.

Results are cached per FilterState. Concurrent fetches of the same state share
one remote call, and subscriptions discard results that a newer request of
theirs has superseded.

The cache is bounded: least recently used states are dropped once
SEARCH_CACHE_MAX_ENTRIES is reached, and an entry expires
SEARCH_CACHE_TTL_SECONDS after it was created. A dropped entry that is still
in flight keeps serving the callers already waiting on it.
"""

from typing import Callable, List, Optional
import asyncio
import logging
import time

from cachetools import TTLCache

from luxuryhomes.core.config import settings
from luxuryhomes.core.exceptions import QueryFailure
from luxuryhomes.models.search import FilterState, FetchResult
from luxuryhomes.modules.search.collection import PropertyCollection
from luxuryhomes.modules.search.query_builder import QueryCompiler

logger = logging.getLogger(__name__)

Listener = Callable[[FetchResult], None]


class _CacheEntry:
    """Most recent result for one filter state, plus its in-flight request"""

    def __init__(self):
        self.result: FetchResult = FetchResult.loading()
        self.task: Optional[asyncio.Task] = None
        self.listeners: List[Listener] = []
        self.holders = 0  # callers currently awaiting the task

    @property
    def in_flight(self) -> bool:
        return self.task is not None and not self.task.done()


class FetchCoordinator:
    """Single-flight, cached execution of compiled listing queries"""

    def __init__(
        self,
        collection: PropertyCollection,
        compiler: Optional[QueryCompiler] = None,
        max_entries: Optional[int] = None,
        ttl: Optional[float] = None,
        timer: Callable[[], float] = time.monotonic,
    ):
        self.collection = collection
        self.compiler = compiler or QueryCompiler()
        self._entries: TTLCache = TTLCache(
            maxsize=max_entries or settings.SEARCH_CACHE_MAX_ENTRIES,
            ttl=ttl or settings.SEARCH_CACHE_TTL_SECONDS,
            timer=timer,
        )

    def __len__(self) -> int:
        return len(self._entries)

    def peek(self, filters: FilterState) -> Optional[FetchResult]:
        entry = self._entries.get(filters)
        return entry.result if entry else None

    def in_flight(self, filters: FilterState) -> bool:
        entry = self._entries.get(filters)
        return bool(entry and entry.in_flight)

    async def fetch(self, filters: FilterState) -> FetchResult:
        entry = self._entries.get(filters)

        if entry is not None and entry.result.is_success:
            logger.debug("Cache hit for filter state")
            return entry.result

        if entry is None:
            entry = self._entries[filters] = _CacheEntry()

        if entry.in_flight:
            logger.debug("Attaching to in-flight request for filter state")
        else:
            # New key, or a previous error: an explicit fetch is the retry
            self._start(entry, filters)

        return await self._wait(filters, entry)

    def add_listener(self, filters: FilterState, listener: Listener) -> Callable[[], None]:
        """Call listener on every status transition of this filter state"""
        entry = self._entries.get(filters)
        if entry is None:
            entry = self._entries[filters] = _CacheEntry()
        entry.listeners.append(listener)

        def remove():
            if listener in entry.listeners:
                entry.listeners.remove(listener)
            # Listened to but never fetched
            if not entry.listeners and entry.task is None and self._entries.get(filters) is entry:
                del self._entries[filters]

        return remove

    def evict(self, filters: FilterState):
        entry = self._entries.pop(filters, None)
        if entry is not None and entry.in_flight and entry.holders == 0:
            entry.task.cancel()

    def clear(self):
        for filters in list(self._entries):
            self.evict(filters)
        logger.info("Cleared listing search cache")

    def _start(self, entry: _CacheEntry, filters: FilterState):
        compiled = self.compiler.compile(filters)
        self._publish(entry, FetchResult.loading())
        entry.task = asyncio.create_task(self._run(entry, compiled))

    async def _run(self, entry: _CacheEntry, compiled):
        try:
            data = await self.collection.search(compiled)
            result = FetchResult.success(data)
        except QueryFailure as e:
            logger.warning(f"Listing query failed: {e.message}")
            result = FetchResult.failure(e.message)
        except Exception as e:
            logger.error(f"Unexpected error from property collection: {e}")
            result = FetchResult.failure(str(e) or e.__class__.__name__)

        self._publish(entry, result)

    async def _wait(self, filters: FilterState, entry: _CacheEntry) -> FetchResult:
        entry.holders += 1
        try:
            # Shielded: one caller going away must not cancel the shared request
            await asyncio.shield(entry.task)
        finally:
            entry.holders -= 1
            self._release_if_abandoned(filters, entry)
        return entry.result

    def _release_if_abandoned(self, filters: FilterState, entry: _CacheEntry):
        if entry.holders > 0 or not entry.in_flight:
            return

        logger.debug("No callers left for in-flight request, cancelling it")
        entry.task.cancel()
        if self._entries.get(filters) is entry:
            del self._entries[filters]

    def _publish(self, entry: _CacheEntry, result: FetchResult):
        entry.result = result
        for listener in list(entry.listeners):
            try:
                listener(result)
            except Exception as e:
                logger.error(f"Fetch listener failed: {e}")


class FetchSubscription:
    """One subscriber's view onto the coordinator.

    Each set_filters() call bumps a generation counter; a result that arrives
    for an older generation is dropped, so the last request wins.
    """

    def __init__(self, coordinator: FetchCoordinator, on_change: Optional[Listener] = None):
        self._coordinator = coordinator
        self._on_change = on_change
        self._generation = 0
        self._pending: Optional[asyncio.Future] = None
        self._remove_listener: Optional[Callable[[], None]] = None
        self.filters: Optional[FilterState] = None
        self.result: Optional[FetchResult] = None

    async def set_filters(self, filters: FilterState) -> Optional[FetchResult]:
        """Switch to a new filter state; returns None if superseded before it resolved"""
        self._generation += 1
        token = self._generation

        self._watch(filters, token)
        self.filters = filters

        # Schedule the new fetch before dropping the old one, so a shared
        # in-flight request for an unchanged key keeps at least one holder
        previous = self._pending
        pending = asyncio.ensure_future(self._coordinator.fetch(filters))
        self._pending = pending
        if previous is not None and not previous.done():
            previous.cancel()

        try:
            result = await pending
        except asyncio.CancelledError:
            if token != self._generation:
                return None
            raise
        finally:
            if self._pending is pending:
                self._pending = None

        if token != self._generation:
            logger.debug(f"Discarding stale result for generation {token}")
            return None

        self._deliver(result)
        return result

    def close(self):
        """Drop interest in the current request"""
        self._generation += 1
        self._cancel_pending()
        if self._remove_listener:
            self._remove_listener()
            self._remove_listener = None

    def _watch(self, filters: FilterState, token: int):
        if self._remove_listener:
            self._remove_listener()

        def listener(result: FetchResult):
            if token == self._generation:
                self._deliver(result)

        self._remove_listener = self._coordinator.add_listener(filters, listener)

    def _cancel_pending(self):
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None

    def _deliver(self, result: FetchResult):
        if result is self.result:
            return
        self.result = result
        if self._on_change:
            self._on_change(result)
