"""Local JSON file key-value store."""

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from calorie_tracker.adapters.state_repository import KeyValueStore

_logger = logging.getLogger(__name__)


@dataclass
class JsonFileStore(KeyValueStore):
    """Keeps every record in a single JSON object on disk."""

    path: Path

    def get(self, key: str) -> object | None:
        """Return the value stored under key."""
        return self._load().get(key)

    def set(self, key: str, value: object) -> None:
        """Store value under key and rewrite the file."""
        data = self._load()
        data[key] = value
        self._dump(data)

    def delete(self, key: str) -> None:
        """Remove key and rewrite the file when it was present."""
        data = self._load()
        if data.pop(key, None) is not None:
            self._dump(data)

    def _load(self) -> dict[str, object]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            _logger.warning("Unreadable state file %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            _logger.warning("State file %s does not hold an object", self.path)
            return {}
        return data

    def _dump(self, data: dict[str, object]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        tmp_path.replace(self.path)
