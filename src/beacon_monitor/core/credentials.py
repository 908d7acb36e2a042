"""In-memory credential cache backed by durable storage."""

import logging
from typing import Awaitable, Callable, Optional

from beacon_monitor.core.interfaces import KeyValueStore

logger = logging.getLogger(__name__)

CREDENTIAL_KEY = "userApiKey"

CredentialListener = Callable[[Optional[str]], Awaitable[None]]


def _normalize(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


class CredentialStore:
    """Cache the user's API key and notify subscribers when it changes."""

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store
        self._value: Optional[str] = None
        self._listeners: list[CredentialListener] = []

    @property
    def value(self) -> Optional[str]:
        """Cached credential; None when the agent is inactive."""
        return self._value

    @property
    def is_active(self) -> bool:
        return self._value is not None

    def subscribe(self, listener: CredentialListener) -> None:
        """Register a coroutine called with the new value on every change."""
        self._listeners.append(listener)

    async def load(self) -> Optional[str]:
        """Read the credential from storage into the cache."""
        self._value = _normalize(await self.store.get(CREDENTIAL_KEY))
        logger.info("API key loaded: %s", "yes" if self._value else "no")
        return self._value

    async def set(self, value: Optional[str]) -> None:
        """Persist a new credential; an empty value clears it."""
        normalized = _normalize(value)
        if normalized is None:
            await self.store.remove(CREDENTIAL_KEY)
        else:
            await self.store.set(CREDENTIAL_KEY, normalized)
        await self.apply_external_change(normalized)

    async def apply_external_change(self, value: Optional[str]) -> None:
        """Handle a storage change notification for the credential key."""
        self._value = _normalize(value)
        logger.info("API key updated: %s", "yes" if self._value else "no")
        await self._notify()

    async def _notify(self) -> None:
        for listener in self._listeners:
            try:
                await listener(self._value)
            except Exception as e:
                logger.error("Credential listener failed: %s", e)
