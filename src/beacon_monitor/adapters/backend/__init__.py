"""Remote service adapters."""

from beacon_monitor.adapters.backend.beacon_client import BeaconClient, BeaconClientError

__all__ = ["BeaconClient", "BeaconClientError"]
