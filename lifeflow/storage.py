"""
LifeFlow — Storage Backends
============================
Key-value persistence boundary used by the database layer.

Two backends share one interface:
    MemoryStorage     In-process dict, used by tests and throwaway sessions
    JSONFileStorage   One file per key under a data directory
"""

import os
from typing import Dict, Optional

from lifeflow.config import DATA_DIR


class KeyValueStorage:
    """
    Minimal string key-value store.

    Subclasses return None from `get` for a missing key and overwrite
    unconditionally in `set`.
    """

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError


class MemoryStorage(KeyValueStorage):
    """Dict-backed storage; nothing survives the process."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def __contains__(self, key: str) -> bool:
        return key in self._data


class JSONFileStorage(KeyValueStorage):
    """Stores each key as `<data_dir>/<key>.json`."""

    def __init__(self, data_dir: str = DATA_DIR):
        self.data_dir = data_dir
        os.makedirs(self.data_dir, exist_ok=True)

    def _path(self, key: str) -> str:
        return os.path.join(self.data_dir, f"{key}.json")

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not os.path.exists(path):
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return f.read()
        except OSError as e:
            print(f"  ✗ Error reading {path}: {e}")
            return None

    def set(self, key: str, value: str) -> None:
        with open(self._path(key), "w", encoding="utf-8") as f:
            f.write(value)
