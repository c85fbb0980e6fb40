"""Bounded per-user record of compliment hashes already issued."""

from __future__ import annotations

import threading
from collections import deque
from pathlib import Path
from typing import Deque, Dict, List, Optional

from .logging import get_logger
from .utils.io import load_yaml_or_json, save_json

LOGGER = get_logger(__name__)

DEFAULT_CAPACITY = 1000
DEFAULT_AVOID_WINDOW = 200


class IssuedHashStore:
    """FIFO list of issued hashes per user, evicting the oldest past ``capacity``."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self._issued: Dict[str, Deque[str]] = {}
        self._lock = threading.Lock()

    def add(self, user_key: str, digest: str) -> None:
        with self._lock:
            entries = self._issued.setdefault(user_key, deque(maxlen=self.capacity))
            if digest not in entries:
                entries.append(digest)

    def issued(self, user_key: str) -> List[str]:
        with self._lock:
            return list(self._issued.get(user_key, ()))

    def avoid_set(self, user_key: str, window: int = DEFAULT_AVOID_WINDOW) -> frozenset[str]:
        """Return the ``window`` most recent hashes issued to ``user_key``."""
        if window <= 0:
            return frozenset()
        return frozenset(self.issued(user_key)[-window:])

    def save(self, path: Path) -> None:
        with self._lock:
            payload = {user: list(entries) for user, entries in self._issued.items()}
        save_json(Path(path), {"capacity": self.capacity, "issued": payload})

    @classmethod
    def load(cls, path: Path, capacity: Optional[int] = None) -> IssuedHashStore:
        path = Path(path)
        if not path.exists():
            LOGGER.info("No issued-hash store at %s; starting empty", path)
            return cls(capacity or DEFAULT_CAPACITY)
        data = load_yaml_or_json(path) or {}
        if not isinstance(data, dict):
            raise TypeError("Expected mapping at root of issued-hash store")
        store = cls(capacity or int(data.get("capacity", DEFAULT_CAPACITY)))
        for user, entries in dict(data.get("issued", {})).items():
            for digest in entries:
                store.add(str(user), str(digest))
        return store
