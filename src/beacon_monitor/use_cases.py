"""Business logic use cases: the page-side monitor and the host coordinator."""

import asyncio
import logging
from typing import Awaitable, Callable, Optional
from urllib.parse import urlsplit

from beacon_monitor.adapters.extraction import HtmlPageExtractor
from beacon_monitor.config import Settings
from beacon_monitor.core import (
    BackendClient,
    ChangeDetector,
    CredentialStore,
    DecisionEnforcer,
    DetectionAction,
    HeartbeatScheduler,
    KeyValueStore,
    Message,
    MessageRouter,
    PageDataReceived,
    PageExtractor,
    PageSource,
    RepeatingTimer,
    RouteResult,
    SearchContextCache,
    Sender,
    SessionSignal,
    SessionTracker,
    TabController,
    content_identity,
    is_short_form,
)
from beacon_monitor.core.entities import is_network_url

logger = logging.getLogger(__name__)

SendMessage = Callable[[Message], Awaitable[None]]


class PageMonitor:
    """Watch one page context and submit its content when it settles.

    Triggers (load, navigation, mutation) feed the change detector; the
    read loop runs as a single task that is cancelled before any new one is
    started, so a page context never has more than one pending retry.
    """

    def __init__(
        self,
        page: PageSource,
        extractor: PageExtractor,
        send: SendMessage,
        detector: Optional[ChangeDetector] = None,
        ignored_domains: Optional[list[str]] = None,
    ) -> None:
        self.page = page
        self.extractor = extractor
        self.send = send
        self.detector = detector or ChangeDetector()
        self.ignored_domains = ignored_domains or []
        self._task: Optional[asyncio.Task] = None
        self._signalled_identity: Optional[str] = None
        self._last_url = ""

    async def on_load(self) -> None:
        """Initial load of the document."""
        await self._trigger()

    async def on_navigation(self) -> None:
        """URL changed, by full navigation or through the history API."""
        await self._trigger()

    async def on_mutation(self, touches_title: bool = True) -> None:
        """DOM changed; only title-bearing changes or a URL change count."""
        snapshot = await self.page.snapshot()
        if snapshot.url != self._last_url or touches_title:
            await self._trigger()

    async def wait_idle(self) -> None:
        """Wait for the current read loop, if any, to finish."""
        if self._task is not None:
            try:
                await self._task
            except asyncio.CancelledError:
                pass

    def close(self) -> None:
        """Tear down: drop any pending retry."""
        self._cancel_pending()

    def is_ignored(self, url: str) -> bool:
        """Our own dashboard pages are never classified."""
        netloc = urlsplit(url).netloc.lower()
        return any(netloc == domain or netloc.endswith("." + domain) for domain in self.ignored_domains)

    async def _trigger(self) -> None:
        snapshot = await self.page.snapshot()
        url = snapshot.url
        self._last_url = url
        identity = content_identity(url)

        await self._signal_session(identity, url)

        if not is_network_url(url) or self.is_ignored(url):
            return

        if not self.detector.begin(identity):
            return

        self._cancel_pending()
        self._task = asyncio.create_task(self._scan())

    async def _signal_session(self, identity: str, url: str) -> None:
        if identity == self._signalled_identity:
            return
        self._signalled_identity = identity
        await self._deliver(SessionSignal(entering=is_short_form(url), url=url))

    async def _scan(self) -> None:
        try:
            await self._read_until_settled()
        except Exception as e:
            logger.error("Scan of %s stopped: %s", self._last_url, e)
        finally:
            # Only the current scan owns the detector; a replaced one must not reset it
            if asyncio.current_task() is self._task:
                self.detector.abandon()

    async def _read_until_settled(self) -> None:
        while True:
            snapshot = await self.page.snapshot()

            identity = content_identity(snapshot.url)
            if identity != self.detector.state.identity:
                # Navigated without a trigger reaching us
                self._last_url = snapshot.url
                await self._signal_session(identity, snapshot.url)
                if not self.detector.begin(identity):
                    return

            try:
                data = await self.extractor.extract(snapshot)
            except Exception as e:
                logger.error("Extraction failed for %s: %s", snapshot.url, e)
                data = None

            step = self.detector.observe(data)

            if step.action == DetectionAction.SUBMIT:
                logger.info("Sending page data for %s", step.data.url)
                await self._deliver(PageDataReceived(data=step.data))
                return

            if step.action in (DetectionAction.GIVE_UP, DetectionAction.IGNORE):
                logger.debug("No usable data for %s", snapshot.url)
                return

            await asyncio.sleep(step.delay)

    async def _deliver(self, message: Message) -> None:
        try:
            await self.send(message)
        except Exception as e:
            logger.warning("Error sending message: %s", e)

    def _cancel_pending(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None


class Coordinator:
    """Host-side service: routes messages, enforces verdicts, keeps the heartbeat."""

    def __init__(
        self,
        settings: Settings,
        backend: BackendClient,
        tabs: TabController,
        sync_store: KeyValueStore,
        local_store: KeyValueStore,
        timer: RepeatingTimer,
    ) -> None:
        self.settings = settings
        self.credentials = CredentialStore(sync_store)
        self.sessions = SessionTracker(local_store, backend, self.credentials)
        self.enforcer = DecisionEnforcer(backend, tabs, self.credentials, settings.block_page_url)
        self.router = MessageRouter(self.credentials, self.enforcer, self.sessions)
        self.heartbeat = HeartbeatScheduler(
            self.credentials,
            backend,
            timer,
            initial_delay=settings.heartbeat.initial_delay,
            period=settings.heartbeat.period,
        )
        self._tasks: set[asyncio.Task] = set()

    async def start(self, schedule_heartbeat: bool = True) -> None:
        """Load the credential and, unless told not to, set up the heartbeat."""
        await self.credentials.load()
        if not schedule_heartbeat:
            return
        self.heartbeat.attach()
        await self.heartbeat.reconfigure()

    async def stop(self) -> None:
        self.heartbeat.timer.cancel()
        await self.drain()

    async def handle(self, message: Message, sender: Sender) -> RouteResult:
        result = await self.router.handle(message, sender)
        if result == RouteResult.UNHANDLED:
            logger.warning("Message from tab %s was not handled", sender.tab_id)
        return result

    def post(self, message: Message, sender: Sender) -> asyncio.Task:
        """Handle a message in its own task; the caller does not wait."""
        task = asyncio.create_task(self.handle(message, sender))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def connect(self, tab_id: int) -> SendMessage:
        """Return the send function for a page context living in tab_id."""

        async def send(message: Message) -> None:
            url = message.data.url if isinstance(message, PageDataReceived) else message.url
            self.post(message, Sender(tab_id=tab_id, url=url))

        return send

    async def drain(self) -> None:
        """Wait for all in-flight message handlers."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)


def create_page_monitor(
    settings: Settings,
    page: PageSource,
    local_store: KeyValueStore,
    send: SendMessage,
) -> PageMonitor:
    """Wire a page monitor with the configured extractor and timings."""
    extractor = HtmlPageExtractor(
        search_context=SearchContextCache(local_store, ttl=settings.extraction.search_context_ttl),
        body_text_limit=settings.extraction.body_text_limit,
    )
    detector = ChangeDetector(
        max_attempts=settings.detection.max_attempts,
        retry_interval=settings.detection.retry_interval,
        verify_delay=settings.detection.verify_delay,
    )
    return PageMonitor(
        page=page,
        extractor=extractor,
        send=send,
        detector=detector,
        ignored_domains=settings.dashboard_domains,
    )
