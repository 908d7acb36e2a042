"""HTTP client for the Beacon classification service."""

from typing import Any

import httpx

from beacon_monitor.core.entities import Decision, LogEvent, PageData
from beacon_monitor.core.interfaces import BackendClient


class BeaconClientError(Exception):
    """Raised when the service can't be reached or answers badly."""


class BeaconClient(BackendClient):
    """Talk to the remote service over HTTPS.

    Calls are never retried here; the next page trigger supplies fresh data.
    """

    def __init__(self, base_url: str, timeout: float = 10.0) -> None:
        """Initialize client.

        Args:
            base_url: Service root, e.g. https://api.beaconblocker.com
            timeout: Per-request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _auth_headers(self, credential: str) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {credential}",
        }

    async def check_url(self, data: PageData, credential: str) -> Decision:
        """Ask the service for a verdict on page data."""
        body = await self._post_json(
            "/check-url",
            payload=data.to_payload(),
            headers=self._auth_headers(credential),
        )
        if not isinstance(body, dict):
            raise BeaconClientError(f"Malformed response: {body!r}")

        try:
            return Decision(body.get("decision"))
        except ValueError:
            raise BeaconClientError(f"Unknown decision: {body.get('decision')!r}")

    async def log_event(self, event: LogEvent, credential: str) -> None:
        """Post an audit event."""
        await self._post("/log-event", json=event.to_payload(), headers=self._auth_headers(credential))

    async def heartbeat(self, credential: str) -> None:
        """Send a liveness ping; the key travels as a query parameter."""
        await self._post("/heartbeat", params={"key": credential})

    async def _post_json(self, path: str, payload: dict[str, Any], headers: dict[str, str]) -> Any:
        response = await self._post(path, json=payload, headers=headers)
        try:
            return response.json()
        except ValueError as e:
            raise BeaconClientError(f"Response from {path} is not JSON: {e}")

    async def _post(self, path: str, **kwargs: Any) -> httpx.Response:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            try:
                response = await client.post(f"{self.base_url}{path}", **kwargs)
                response.raise_for_status()
            except httpx.HTTPError as e:
                raise BeaconClientError(f"{path} failed: {e}") from e
        return response
