"""Periodic liveness ping."""

import logging
from typing import Optional

from beacon_monitor.core.credentials import CredentialStore
from beacon_monitor.core.interfaces import BackendClient, RepeatingTimer

logger = logging.getLogger(__name__)


class HeartbeatScheduler:
    """Keep a repeating heartbeat running while a credential is installed."""

    def __init__(
        self,
        credentials: CredentialStore,
        backend: BackendClient,
        timer: RepeatingTimer,
        initial_delay: float = 60.0,
        period: float = 600.0,
    ) -> None:
        self.credentials = credentials
        self.backend = backend
        self.timer = timer
        self.initial_delay = initial_delay
        self.period = period

    def attach(self) -> None:
        """Reconfigure whenever the credential changes."""
        self.credentials.subscribe(self._on_credential_change)

    async def _on_credential_change(self, value: Optional[str]) -> None:
        await self.reconfigure()

    async def reconfigure(self) -> None:
        """Create or cancel the timer to match the credential. Idempotent."""
        if not self.credentials.is_active:
            if self.timer.active:
                self.timer.cancel()
                logger.info("Heartbeat timer cancelled")
            else:
                logger.debug("No API key, not scheduling heartbeat")
            return

        if not self.timer.active:
            self.timer.start(self.initial_delay, self.period, self.ping)
            logger.info(
                "Heartbeat timer created (first in %.0fs, every %.0fs)",
                self.initial_delay,
                self.period,
            )
        await self.ping()

    async def ping(self) -> None:
        """Send one heartbeat; failures are logged and dropped."""
        credential = self.credentials.value
        if not credential:
            logger.debug("No API key, skipping heartbeat")
            return
        try:
            await self.backend.heartbeat(credential)
            logger.debug("Heartbeat sent")
        except Exception as e:
            logger.warning("Heartbeat failed: %s", e)
