"""Tests for decision enforcement."""

from unittest.mock import AsyncMock

import httpx
import pytest

from beacon_monitor.adapters.backend import BeaconClientError
from beacon_monitor.adapters.browser import InMemoryTabs
from beacon_monitor.adapters.storage import MemoryStore
from beacon_monitor.core import CredentialStore, Decision, DecisionEnforcer, PageSummary, ShortFormFlag

BLOCK_PAGE = "beacon://blocked.html"
PAGE_URL = "https://example.com/page"


async def make_enforcer(backend: AsyncMock, tabs: InMemoryTabs, key: str = "secret") -> DecisionEnforcer:
    credentials = CredentialStore(MemoryStore({"userApiKey": key} if key else {}))
    await credentials.load()
    return DecisionEnforcer(backend, tabs, credentials, BLOCK_PAGE)


@pytest.mark.asyncio
async def test_block_redirects_tab(backend: AsyncMock) -> None:
    """Test BLOCK sends the tab to the block page."""
    backend.check_url.return_value = Decision.BLOCK
    tabs = InMemoryTabs({1: PAGE_URL})
    enforcer = await make_enforcer(backend, tabs)
    data = PageSummary(url=PAGE_URL, title="Bad page")

    decision = await enforcer.enforce(data, 1)

    assert decision == Decision.BLOCK
    assert tabs.tabs[1] == BLOCK_PAGE
    backend.check_url.assert_awaited_once_with(data, "secret")


@pytest.mark.asyncio
async def test_allow_leaves_tab_alone(backend: AsyncMock) -> None:
    """Test ALLOW does not navigate."""
    tabs = InMemoryTabs({1: PAGE_URL})
    enforcer = await make_enforcer(backend, tabs)

    decision = await enforcer.enforce(PageSummary(url=PAGE_URL, title="Fine"), 1)

    assert decision == Decision.ALLOW
    assert tabs.history == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [
        BeaconClientError("/check-url failed: 500 Internal Server Error"),
        httpx.TimeoutException("timed out"),
        ValueError("malformed"),
    ],
)
async def test_failure_is_fail_closed(backend: AsyncMock, error: Exception) -> None:
    """Test any classifier failure blocks exactly like a BLOCK verdict."""
    backend.check_url.side_effect = error
    tabs = InMemoryTabs({1: PAGE_URL})
    enforcer = await make_enforcer(backend, tabs)

    decision = await enforcer.enforce(PageSummary(url=PAGE_URL, title="Unknown"), 1)

    assert decision == Decision.BLOCK
    assert tabs.tabs[1] == BLOCK_PAGE


@pytest.mark.asyncio
async def test_tab_already_blocked_is_not_redirected_again(backend: AsyncMock) -> None:
    """Test a duplicate BLOCK for a blocked tab is a no-op."""
    backend.check_url.return_value = Decision.BLOCK
    tabs = InMemoryTabs({1: PAGE_URL})
    enforcer = await make_enforcer(backend, tabs)
    data = PageSummary(url=PAGE_URL, title="Bad page")

    await enforcer.enforce(data, 1)
    await enforcer.enforce(data, 1)

    assert tabs.history == [(1, BLOCK_PAGE)]


@pytest.mark.asyncio
async def test_closed_tab_is_benign(backend: AsyncMock) -> None:
    """Test a tab closed before the verdict arrives is not an error."""
    backend.check_url.return_value = Decision.BLOCK
    tabs = InMemoryTabs()
    enforcer = await make_enforcer(backend, tabs)

    decision = await enforcer.enforce(PageSummary(url=PAGE_URL, title="Bad page"), 42)

    assert decision == Decision.BLOCK
    assert tabs.history == []


@pytest.mark.asyncio
async def test_stale_verdict_is_not_applied(backend: AsyncMock) -> None:
    """Test a verdict for a page the tab already left is dropped."""
    backend.check_url.return_value = Decision.BLOCK
    tabs = InMemoryTabs({1: "https://example.com/somewhere-else"})
    enforcer = await make_enforcer(backend, tabs)

    await enforcer.enforce(PageSummary(url=PAGE_URL, title="Bad page"), 1)

    assert tabs.history == []


@pytest.mark.asyncio
async def test_same_video_different_params_is_not_stale(backend: AsyncMock) -> None:
    """Test identity, not the raw URL, decides staleness."""
    backend.check_url.return_value = Decision.BLOCK
    tabs = InMemoryTabs({1: "https://www.youtube.com/watch?v=abc&t=42s"})
    enforcer = await make_enforcer(backend, tabs)

    await enforcer.enforce(PageSummary(url="https://www.youtube.com/watch?v=abc", title="Video"), 1)

    assert tabs.tabs[1] == BLOCK_PAGE


@pytest.mark.asyncio
async def test_short_form_flag_is_classified(backend: AsyncMock) -> None:
    """Test short-form markers go through the same check."""
    backend.check_url.return_value = Decision.BLOCK
    url = "https://www.youtube.com/shorts/abc"
    tabs = InMemoryTabs({1: url})
    enforcer = await make_enforcer(backend, tabs)

    await enforcer.enforce(ShortFormFlag(url=url), 1)

    assert tabs.tabs[1] == BLOCK_PAGE


@pytest.mark.asyncio
async def test_no_credential_skips_check(backend: AsyncMock) -> None:
    """Test nothing is sent when the key is gone."""
    tabs = InMemoryTabs({1: PAGE_URL})
    enforcer = await make_enforcer(backend, tabs, key="")

    await enforcer.enforce(PageSummary(url=PAGE_URL, title="Page"), 1)

    backend.check_url.assert_not_called()
    assert tabs.history == []
