"""Address-keyed storage for geolocation results."""

import json
import logging
from pathlib import Path
from typing import Dict, Optional, Protocol

logger = logging.getLogger(__name__)


class LocationCache(Protocol):
    def get(self, address: str) -> Optional[dict]: ...

    def set(self, address: str, location: dict) -> None: ...


class MemoryLocationCache:
    """Process-local cache; entries live as long as the instance."""

    def __init__(self, entries: Optional[Dict[str, dict]] = None) -> None:
        self._entries: Dict[str, dict] = dict(entries or {})

    def get(self, address: str) -> Optional[dict]:
        return self._entries.get(address)

    def set(self, address: str, location: dict) -> None:
        self._entries[address] = location

    def __len__(self) -> int:
        return len(self._entries)


class JsonFileLocationCache(MemoryLocationCache):
    """Cache persisted as a single JSON object so lookups survive between builds.

    Every :meth:`set` rewrites the file. There is no expiry.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        super().__init__(self._load())

    def _load(self) -> Dict[str, dict]:
        if not self.path.is_file():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable location cache %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring location cache %s: not a JSON object", self.path)
            return {}
        return data

    def set(self, address: str, location: dict) -> None:
        super().set(address, location)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(self._entries, f, ensure_ascii=False, indent=2, sort_keys=True)
        tmp_path.replace(self.path)
