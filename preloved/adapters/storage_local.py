from __future__ import annotations

import json
import os
import re
import threading
from typing import Any, Optional

from preloved.domain.ports import KeyValueStorePort

_KEY_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


class StorageLocal(KeyValueStorePort):
    """Local filesystem key/value store: one JSON document per key."""

    def __init__(self, root_dir: str = ".") -> None:
        self.root = root_dir
        self._lock = threading.Lock()

    def _path(self, key: str) -> str:
        if not _KEY_RE.match(key or ""):
            raise ValueError(f"Invalid storage key: {key!r}")
        return os.path.join(self.root, f"{key}.json")

    # ---- typed accessors ----
    def get_text(self, key: str) -> Optional[str]:
        try:
            value = self.get_json(key)
        except ValueError:
            return None
        if value is None:
            return None
        return value if isinstance(value, str) else str(value)

    def set_text(self, key: str, value: str) -> None:
        self.set_json(key, str(value))

    def get_json(self, key: str) -> Any:
        """Return the stored document, ``None`` when missing.

        Raises:
            ValueError: If the file exists but does not hold valid JSON.
        """
        path = self._path(key)
        with self._lock:
            if not os.path.exists(path):
                return None
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)

    def set_json(self, key: str, value: Any) -> None:
        path = self._path(key)
        tmp_path = f"{path}.tmp"
        with self._lock:
            os.makedirs(self.root, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(value, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, path)

    def delete(self, key: str) -> None:
        path = self._path(key)
        with self._lock:
            if os.path.exists(path):
                os.remove(path)
