"""Browser primitives: tabs, pages and timers."""

from beacon_monitor.adapters.browser.pages import StaticPage
from beacon_monitor.adapters.browser.tabs import InMemoryTabs
from beacon_monitor.adapters.browser.timers import AsyncioRepeatingTimer

__all__ = ["AsyncioRepeatingTimer", "InMemoryTabs", "StaticPage"]
