"""Core interfaces for adapters."""

from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Optional

from beacon_monitor.core.entities import Decision, LogEvent, PageData, PageSnapshot


class KeyValueStore(ABC):
    """Interface for durable key/value storage."""

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """Return stored value or None."""
        pass

    @abstractmethod
    async def set(self, key: str, value: Any) -> None:
        """Store value under key."""
        pass

    @abstractmethod
    async def remove(self, key: str) -> None:
        """Remove key; missing keys are ignored."""
        pass

    @abstractmethod
    async def compare_and_swap(self, key: str, expected: Any, new: Any) -> bool:
        """Atomically replace value if it equals expected.

        A `new` of None removes the key. Returns True if the swap happened.
        """
        pass


class BackendClient(ABC):
    """Interface for the remote classification service."""

    @abstractmethod
    async def check_url(self, data: PageData, credential: str) -> Decision:
        """Classify page data."""
        pass

    @abstractmethod
    async def log_event(self, event: LogEvent, credential: str) -> None:
        """Post an audit event."""
        pass

    @abstractmethod
    async def heartbeat(self, credential: str) -> None:
        """Send a liveness ping."""
        pass


class TabController(ABC):
    """Interface for the browser's tab primitives."""

    @abstractmethod
    async def get_url(self, tab_id: int) -> Optional[str]:
        """Current URL of the tab, or None if the tab no longer exists."""
        pass

    @abstractmethod
    async def navigate(self, tab_id: int, url: str) -> None:
        """Navigate tab to URL."""
        pass


class PageSource(ABC):
    """Interface for reading the observed page."""

    @abstractmethod
    async def snapshot(self) -> PageSnapshot:
        """Read current URL and document."""
        pass


class RepeatingTimer(ABC):
    """Interface for a named repeating timer."""

    @property
    @abstractmethod
    def active(self) -> bool:
        """Whether the timer is scheduled."""
        pass

    @abstractmethod
    def start(
        self,
        initial_delay: float,
        period: float,
        callback: Callable[[], Awaitable[None]],
    ) -> None:
        """Schedule callback after initial_delay, then every period seconds."""
        pass

    @abstractmethod
    def cancel(self) -> None:
        """Cancel the timer if scheduled."""
        pass


class PageExtractor(ABC):
    """Interface for turning a page snapshot into classifiable data."""

    @abstractmethod
    async def extract(self, snapshot: PageSnapshot) -> Optional[PageData]:
        """Return page data, or None when the page has nothing usable."""
        pass
