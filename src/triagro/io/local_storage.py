"""JSON-file backed key/value blob storage."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


class LocalStorage:
    """
    Small key/value store holding JSON-serialisable blobs in one file.

    Mirrors browser local storage: each key maps to one independent value,
    values are overwritten whole, and a missing or unreadable file reads
    as an empty store.

    Format:
    {
        "version": 1,
        "items": {
            "<key>": <any JSON value>
        }
    }
    """

    STORAGE_VERSION = 1

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def get_item(self, key: str) -> Optional[Any]:
        """Return the value stored under key, or None if absent."""
        return self._read_items().get(key)

    def set_item(self, key: str, value: Any) -> None:
        """Store value under key, replacing any previous value."""
        items = self._read_items()
        items[key] = value
        self._write_items(items)

    def remove_item(self, key: str) -> None:
        """Remove key if present."""
        items = self._read_items()
        if key in items:
            del items[key]
            self._write_items(items)

    def keys(self) -> List[str]:
        return list(self._read_items().keys())

    def clear(self) -> None:
        """Delete the backing file."""
        if self.path.exists():
            try:
                self.path.unlink()
            except OSError as e:
                logger.error("Could not delete storage file %s: %s", self.path, e)

    def _read_items(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
            logger.warning("Ignoring unreadable storage file %s: %s", self.path, e)
            return {}

        items = data.get("items") if isinstance(data, dict) else None
        return dict(items) if isinstance(items, dict) else {}

    def _write_items(self, items: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data = {"version": self.STORAGE_VERSION, "items": items}
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
        tmp_path.replace(self.path)
