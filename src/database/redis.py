"""
Lightweight in-memory RedisCache replacement for local development.

This implements just enough of the interface used by the wizard `StateManager`
and the `PreferenceStore` so that the FastAPI app can run without a real Redis
instance.
"""

from __future__ import annotations

import copy
from typing import Any, Dict, Optional, Set


class RedisCache:
    def __init__(self) -> None:
        # Simple in-memory store: session_id -> data
        self._sessions: Dict[str, Dict[str, Any]] = {}
        # Plain key/value entries used for preferences
        self._values: Dict[str, Any] = {}
        # Held lock names; TTL is ignored like everywhere else here
        self._locks: Set[str] = set()

    # --- Session helpers used by StateManager ---------------------------------

    def set_session(self, session_id: str, data: Dict[str, Any], ttl: int = 1800) -> None:
        # TTL is ignored in this in-memory implementation.
        self._sessions[session_id] = copy.deepcopy(data)

    def get_session(self, session_id: str) -> Optional[Dict[str, Any]]:
        data = self._sessions.get(session_id)
        return copy.deepcopy(data) if data is not None else None

    def update_session(self, session_id: str, updates: Dict[str, Any]) -> None:
        if session_id not in self._sessions:
            return
        self._sessions[session_id].update(updates)

    def delete_session(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)

    # --- Key/value helpers used by PreferenceStore ----------------------------

    def get_value(self, key: str) -> Optional[Any]:
        return copy.deepcopy(self._values.get(key))

    def set_value(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        self._values[key] = copy.deepcopy(value)

    def delete_value(self, key: str) -> None:
        self._values.pop(key, None)

    def delete_prefix(self, prefix: str) -> int:
        keys = [k for k in self._values if k.startswith(prefix)]
        for key in keys:
            del self._values[key]
        return len(keys)

    # --- Locks ----------------------------------------------------------------

    def acquire_lock(self, name: str, ttl: int = 60) -> bool:
        if name in self._locks:
            return False
        self._locks.add(name)
        return True

    def release_lock(self, name: str) -> None:
        self._locks.discard(name)

    # --- Misc -----------------------------------------------------------------

    def ping(self) -> bool:
        """
        FastAPI health check calls this; always return True so the API reports
        the cache as "connected" in local/dev mode.
        """
        return True
