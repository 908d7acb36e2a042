"""Inbound message routing on the coordinator side."""

import logging
from enum import Enum

from beacon_monitor.core.credentials import CredentialStore
from beacon_monitor.core.enforcer import DecisionEnforcer
from beacon_monitor.core.entities import Message, MessageKind, PageDataReceived, Sender
from beacon_monitor.core.session_tracker import SessionTracker

logger = logging.getLogger(__name__)


class RouteResult(str, Enum):
    """How a message was dealt with."""

    HANDLED = "handled"
    IGNORED_NO_CREDENTIAL = "ignored_no_credential"
    IGNORED_INVALID = "ignored_invalid"
    IGNORED_BLOCK_PAGE = "ignored_block_page"
    UNHANDLED = "unhandled"


class MessageRouter:
    """Gate messages on the credential and dispatch them by kind."""

    def __init__(
        self,
        credentials: CredentialStore,
        enforcer: DecisionEnforcer,
        sessions: SessionTracker,
    ) -> None:
        self.credentials = credentials
        self.enforcer = enforcer
        self.sessions = sessions

    async def handle(self, message: Message, sender: Sender) -> RouteResult:
        """Route one message from a page context."""
        if not self.credentials.is_active:
            logger.debug("Message received, but no API key is set. Ignoring.")
            return RouteResult.IGNORED_NO_CREDENTIAL

        kind = getattr(message, "kind", None)

        if kind == MessageKind.PAGE_DATA_RECEIVED:
            return await self._handle_page_data(message, sender)

        if kind == MessageKind.SESSION_SIGNAL:
            await self.sessions.handle_signal(message.entering, message.url or sender.url)
            return RouteResult.HANDLED

        logger.warning("Unhandled message: %r", message)
        return RouteResult.UNHANDLED

    async def _handle_page_data(self, message: PageDataReceived, sender: Sender) -> RouteResult:
        url = message.data.url
        if sender.tab_id is None or not url:
            return RouteResult.IGNORED_INVALID

        if url.startswith(self.enforcer.block_page_url):
            return RouteResult.IGNORED_BLOCK_PAGE

        logger.debug("Received page data for %s", url)
        await self.enforcer.enforce(message.data, sender.tab_id)
        return RouteResult.HANDLED
