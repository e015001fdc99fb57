from __future__ import annotations

import json
import re
import threading
from pathlib import Path

from booking_flow.application.ports.session_storage import SessionStoragePort
from booking_flow.core.config import settings

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


class JsonSessionStorage(SessionStoragePort):
    """Session-scoped key/value storage, one JSON file per browser session."""

    def __init__(self, session_id: str, data_dir: str | None = None) -> None:
        self._data_dir = Path(data_dir or settings.SESSION_STORE_DIR)
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._session_id = _UNSAFE_CHARS.sub("_", session_id) or "anonymous"
        self._lock = threading.Lock()

    def _get_file_path(self) -> Path:
        return self._data_dir / f"{self._session_id}.json"

    def _load(self) -> dict[str, str]:
        """Load the session's items, empty if the file is missing or corrupted."""
        file_path = self._get_file_path()
        if not file_path.exists():
            return {}
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, IOError):
            return {}
        items = data.get("items") if isinstance(data, dict) else None
        if not isinstance(items, dict):
            return {}
        return {str(k): v for k, v in items.items() if isinstance(v, str)}

    def _save(self, items: dict[str, str]) -> None:
        """Write the session file atomically."""
        file_path = self._get_file_path()
        temp_path = file_path.with_suffix(".json.tmp")
        data = {"session_id": self._session_id, "items": items, "version": 1}

        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            temp_path.replace(file_path)
        except Exception:
            if temp_path.exists():
                temp_path.unlink(missing_ok=True)
            raise

    def get_item(self, key: str) -> str | None:
        with self._lock:
            return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            items = self._load()
            items[key] = value
            self._save(items)

    def remove_item(self, key: str) -> None:
        with self._lock:
            items = self._load()
            if items.pop(key, None) is not None:
                self._save(items)
