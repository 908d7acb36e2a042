"""Key/value stores: YAML file backed and in-memory."""

import asyncio
import copy
import logging
from pathlib import Path
from typing import Any, Optional

import yaml

from beacon_monitor.core.interfaces import KeyValueStore

logger = logging.getLogger(__name__)


class MemoryStore(KeyValueStore):
    """Volatile store, values are deep-copied in and out."""

    def __init__(self, initial: Optional[dict[str, Any]] = None) -> None:
        self._data: dict[str, Any] = copy.deepcopy(initial) if initial else {}
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> Optional[Any]:
        return copy.deepcopy(self._data.get(key))

    async def set(self, key: str, value: Any) -> None:
        async with self._lock:
            self._data[key] = copy.deepcopy(value)

    async def remove(self, key: str) -> None:
        async with self._lock:
            self._data.pop(key, None)

    async def compare_and_swap(self, key: str, expected: Any, new: Any) -> bool:
        async with self._lock:
            if self._data.get(key) != expected:
                return False
            if new is None:
                self._data.pop(key, None)
            else:
                self._data[key] = copy.deepcopy(new)
            return True


class YamlFileStore(KeyValueStore):
    """Durable store keeping all keys in one YAML document.

    Every write rewrites the file through a temporary sibling and a rename,
    so a crash never leaves a half-written document behind.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self._lock = asyncio.Lock()

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.error("Could not read store %s: %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, allow_unicode=True, default_flow_style=False, sort_keys=True)
        tmp_path.replace(self.path)

    async def get(self, key: str) -> Optional[Any]:
        return self._read().get(key)

    async def set(self, key: str, value: Any) -> None:
        async with self._lock:
            data = self._read()
            data[key] = value
            self._write(data)

    async def remove(self, key: str) -> None:
        async with self._lock:
            data = self._read()
            if key in data:
                del data[key]
                self._write(data)

    async def compare_and_swap(self, key: str, expected: Any, new: Any) -> bool:
        async with self._lock:
            data = self._read()
            if data.get(key) != expected:
                return False
            if new is None:
                data.pop(key, None)
            else:
                data[key] = new
            self._write(data)
            return True
