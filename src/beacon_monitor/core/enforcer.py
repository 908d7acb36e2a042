"""Classification and fail-closed enforcement."""

import logging
from typing import Optional

from beacon_monitor.core.credentials import CredentialStore
from beacon_monitor.core.entities import Decision, PageData
from beacon_monitor.core.identity import content_identity
from beacon_monitor.core.interfaces import BackendClient, TabController

logger = logging.getLogger(__name__)


class DecisionEnforcer:
    """Ask the classifier about a page and block the tab when told to.

    Any failure to get a clean verdict counts as BLOCK.
    """

    def __init__(
        self,
        backend: BackendClient,
        tabs: TabController,
        credentials: CredentialStore,
        block_page_url: str,
    ) -> None:
        self.backend = backend
        self.tabs = tabs
        self.credentials = credentials
        self.block_page_url = block_page_url
        self.last_decision: Optional[Decision] = None

    async def enforce(self, data: PageData, tab_id: int) -> Decision:
        """Classify data and apply the verdict to the tab."""
        credential = self.credentials.value
        if not credential:
            # Credential was cleared while the request was queued
            logger.info("No API key, skipping check for %s", data.url)
            return Decision.ALLOW

        try:
            decision = await self.backend.check_url(data, credential)
            logger.info("Decision for %s is %s", data.url, decision.value)
        except Exception as e:
            logger.error("Classifier failed for %s, blocking: %s", data.url, e)
            decision = Decision.BLOCK

        self.last_decision = decision
        if decision == Decision.BLOCK:
            await self.redirect_to_block_page(tab_id, data.url)
        return decision

    async def redirect_to_block_page(self, tab_id: int, page_url: str) -> bool:
        """Send tab to the block page. Returns True if navigation happened."""
        current_url = await self.tabs.get_url(tab_id)
        if current_url is None:
            logger.warning("Tab %s closed before block could be applied", tab_id)
            return False

        if current_url.startswith(self.block_page_url):
            return False

        if content_identity(current_url) != content_identity(page_url):
            logger.info("Tab %s moved on from %s, verdict is stale", tab_id, page_url)
            return False

        await self.tabs.navigate(tab_id, self.block_page_url)
        logger.info("Tab %s redirected to block page", tab_id)
        return True
