"""Search query attribution across page views."""

import logging
import time
from typing import Callable, Optional

from beacon_monitor.core.entities import SearchContext
from beacon_monitor.core.interfaces import KeyValueStore

logger = logging.getLogger(__name__)

SEARCH_CONTEXT_KEY = "searchContext"


class SearchContextCache:
    """Remember the last search so later page views can be attributed to it."""

    def __init__(
        self,
        store: KeyValueStore,
        ttl: float = 300.0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.store = store
        self.ttl = ttl
        self.clock = clock

    async def remember(self, query: str) -> None:
        """Overwrite the stored context with a new query."""
        context = SearchContext(query=query, timestamp=self.clock())
        await self.store.set(SEARCH_CONTEXT_KEY, context.to_record())
        logger.debug("Search context saved: %s", query)

    async def recall(self) -> Optional[str]:
        """Return the stored query while it is still valid.

        The record is left in place; it simply stops applying once expired.
        """
        context = SearchContext.from_record(await self.store.get(SEARCH_CONTEXT_KEY))
        if context is None:
            return None
        if not context.is_valid(self.clock(), self.ttl):
            return None
        return context.query
