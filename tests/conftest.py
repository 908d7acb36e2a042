"""Shared test fixtures."""

from typing import Awaitable, Callable, Optional
from unittest.mock import AsyncMock

import pytest

from beacon_monitor.config import Settings
from beacon_monitor.core import Decision, PageSnapshot, PageSource, RepeatingTimer


class FakeTimer(RepeatingTimer):
    """Timer that records scheduling without running anything."""

    def __init__(self) -> None:
        self.started: list[tuple[float, float]] = []
        self.callback: Optional[Callable[[], Awaitable[None]]] = None
        self.cancelled = 0
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    def start(self, initial_delay: float, period: float, callback: Callable[[], Awaitable[None]]) -> None:
        self.started.append((initial_delay, period))
        self.callback = callback
        self._active = True

    def cancel(self) -> None:
        if self._active:
            self.cancelled += 1
        self._active = False


class SequencePage(PageSource):
    """Page that returns queued snapshots, repeating the last one."""

    def __init__(self, snapshots: list[PageSnapshot]) -> None:
        self.snapshots = list(snapshots)
        self.reads = 0

    async def snapshot(self) -> PageSnapshot:
        self.reads += 1
        if len(self.snapshots) > 1:
            return self.snapshots.pop(0)
        return self.snapshots[0]


def html_page(title: str = "", body: str = "", head: str = "") -> str:
    return f"<html><head><title>{title}</title>{head}</head><body>{body}</body></html>"


@pytest.fixture
def fast_settings() -> Settings:
    """Settings with detection delays removed."""
    settings = Settings()
    settings.detection.max_attempts = 5
    settings.detection.retry_interval = 0.0
    settings.detection.verify_delay = 0.0
    return settings


@pytest.fixture
def backend() -> AsyncMock:
    """Backend client mock answering ALLOW."""
    mock = AsyncMock()
    mock.check_url.return_value = Decision.ALLOW
    return mock
