"""In-process tab registry."""

import logging
from typing import Optional

from beacon_monitor.core.interfaces import TabController

logger = logging.getLogger(__name__)


class InMemoryTabs(TabController):
    """Track tab URLs in a dict; navigation just records the new URL."""

    def __init__(self, tabs: Optional[dict[int, str]] = None) -> None:
        self.tabs: dict[int, str] = dict(tabs or {})
        self.history: list[tuple[int, str]] = []

    def open(self, tab_id: int, url: str) -> None:
        self.tabs[tab_id] = url

    def close(self, tab_id: int) -> None:
        self.tabs.pop(tab_id, None)

    async def get_url(self, tab_id: int) -> Optional[str]:
        return self.tabs.get(tab_id)

    async def navigate(self, tab_id: int, url: str) -> None:
        if tab_id not in self.tabs:
            logger.warning("Tab %s does not exist", tab_id)
            return
        self.tabs[tab_id] = url
        self.history.append((tab_id, url))
