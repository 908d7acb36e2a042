"""Key/value storage adapters."""

from beacon_monitor.adapters.storage.yaml_store import MemoryStore, YamlFileStore

__all__ = ["MemoryStore", "YamlFileStore"]
