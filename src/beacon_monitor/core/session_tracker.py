"""Short-form viewing session aggregation."""

import asyncio
import logging
import time
from typing import Callable, Optional

from beacon_monitor.core.credentials import CredentialStore
from beacon_monitor.core.entities import Decision, LogEvent, ShortsSession
from beacon_monitor.core.interfaces import BackendClient, KeyValueStore

logger = logging.getLogger(__name__)

SHORTS_SESSION_KEY = "shortsSession"


class SessionTracker:
    """Track continuous short-form viewing as one session.

    Only the session boundaries are logged. Entries in between just bump the
    stored count, so a long scroll through a feed costs two log events.

    Updates are serialized through one lock and committed with
    compare-and-swap, so a writer outside this process is never silently
    overwritten.
    """

    def __init__(
        self,
        store: KeyValueStore,
        backend: BackendClient,
        credentials: CredentialStore,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.store = store
        self.backend = backend
        self.credentials = credentials
        self.clock = clock
        self._lock = asyncio.Lock()

    async def current(self) -> Optional[ShortsSession]:
        """Return the active session, if any."""
        return ShortsSession.from_record(await self.store.get(SHORTS_SESSION_KEY))

    async def handle_signal(self, entering: bool, url: str) -> None:
        """Apply one entering/leaving signal."""
        async with self._lock:
            while True:
                record = await self.store.get(SHORTS_SESSION_KEY)
                session = ShortsSession.from_record(record)

                if entering and session is None:
                    session = ShortsSession(count=1, start_time=self.clock())
                    new_record = session.to_record()
                    event = LogEvent(
                        title="Started watching Shorts",
                        reason="Shorts Session (Start)",
                        decision=Decision.ALLOW,
                        url=url,
                    )
                elif entering:
                    session.count += 1
                    new_record = session.to_record()
                    event = None
                elif session is not None:
                    new_record = None
                    event = LogEvent(
                        title=f"Finished watching Shorts (Total: {session.count})",
                        reason="Shorts Session (End)",
                        decision=Decision.ALLOW,
                        url=url,
                    )
                else:
                    return

                if await self.store.compare_and_swap(SHORTS_SESSION_KEY, record, new_record):
                    break
                logger.debug("Shorts session changed underneath us, retrying")

        if event is None:
            logger.debug("Shorts session continues, count=%d", session.count)
            return

        if new_record is None:
            logger.info("Ending shorts session, total=%d", session.count)
        else:
            logger.info("Starting shorts session")
        await self._send(event)

    async def _send(self, event: LogEvent) -> None:
        credential = self.credentials.value
        if not credential:
            return
        try:
            await self.backend.log_event(event, credential)
        except Exception as e:
            logger.warning("Log event failed: %s", e)
