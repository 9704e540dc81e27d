from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

_MISSING = object()


class JsonStore:
    """
    Key-value store backed by a single JSON file.

    Every write rewrites the file through a temp file + rename, and
    subscribers are called with the key that changed.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._data: Dict[str, Any] = {}
        self._listeners: List[Callable[[str], None]] = []
        self._load()

    # ---------- persistence ----------
    def _load(self) -> None:
        if not self.path.exists():
            self._data = {}
            return
        try:
            parsed = json.loads(self.path.read_text() or "{}")
        except (OSError, ValueError) as e:
            logger.warning("Failed to read store %s, starting empty: %s", self.path, e)
            self._data = {}
            return
        if not isinstance(parsed, dict):
            logger.warning("Store %s is not a JSON object, starting empty", self.path)
            parsed = {}
        self._data = parsed

    def _flush(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(self._data, indent=2, default=str))
        os.replace(tmp, self.path)

    def reload(self) -> None:
        """Re-read the file (another session may have written it)."""
        self._load()

    # ---------- API ----------
    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value
        self._flush()
        self._notify(key)

    def remove(self, key: str) -> None:
        if self._data.pop(key, _MISSING) is _MISSING:
            return
        self._flush()
        self._notify(key)

    def keys(self) -> List[str]:
        return list(self._data.keys())

    def clear(self) -> None:
        keys = self.keys()
        self._data = {}
        self._flush()
        for k in keys:
            self._notify(k)

    def __contains__(self, key: str) -> bool:
        return key in self._data

    # ---------- change events ----------
    def subscribe(self, callback: Callable[[str], None]) -> Callable[[], None]:
        """Register callback(key); returns an unsubscribe function."""
        self._listeners.append(callback)

        def _unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return _unsubscribe

    def _notify(self, key: str) -> None:
        for cb in list(self._listeners):
            cb(key)


class MemoryStore(JsonStore):
    """Same API without touching disk; used for tests and throwaway sessions."""

    def __init__(self, initial: Dict[str, Any] | None = None):
        self.path = Path(os.devnull)
        self._data = dict(initial or {})
        self._listeners = []

    def _load(self) -> None:
        pass

    def _flush(self) -> None:
        pass
