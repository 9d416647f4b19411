"""
Real Redis-backed cache for production when REDIS_URL is set. Implements the
same interface as src.database.redis (in-memory stub).
"""

from __future__ import annotations

import json
from typing import Any, Dict, Optional

import redis


class RedisCache:
    """
    Redis-backed session and preference cache. Use when REDIS_URL is set in production.
    """

    def __init__(self, url: str, default_ttl: int = 1800, client: Optional[redis.Redis] = None) -> None:
        self._client = client or redis.from_url(url, decode_responses=True)
        self._default_ttl = default_ttl

    def _load(self, key: str) -> Optional[Any]:
        raw = self._client.get(key)
        if not raw:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            return None

    # --- Sessions -------------------------------------------------------------

    def set_session(self, session_id: str, data: Dict[str, Any], ttl: int = 1800) -> None:
        key = f"session:{session_id}"
        payload = json.dumps(data, default=str)
        self._client.setex(key, ttl or self._default_ttl, payload)

    def get_session(self, session_id: str) -> Optional[Dict[str, Any]]:
        data = self._load(f"session:{session_id}")
        return data if isinstance(data, dict) else None

    def update_session(self, session_id: str, updates: Dict[str, Any]) -> None:
        existing = self.get_session(session_id)
        if not existing:
            return
        existing.update(updates)
        self.set_session(session_id, existing, ttl=self._default_ttl)

    def delete_session(self, session_id: str) -> None:
        self._client.delete(f"session:{session_id}")

    # --- Key/value preferences -----------------------------------------------

    def get_value(self, key: str) -> Optional[Any]:
        return self._load(f"kv:{key}")

    def set_value(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        payload = json.dumps(value, default=str)
        if ttl:
            self._client.setex(f"kv:{key}", ttl, payload)
        else:
            self._client.set(f"kv:{key}", payload)

    def delete_value(self, key: str) -> None:
        self._client.delete(f"kv:{key}")

    def delete_prefix(self, prefix: str) -> int:
        keys = list(self._client.scan_iter(match=f"kv:{prefix}*"))
        if not keys:
            return 0
        return int(self._client.delete(*keys))

    # --- Locks ----------------------------------------------------------------

    def acquire_lock(self, name: str, ttl: int = 60) -> bool:
        """SET NX with an expiry; False while another holder has the lock."""
        return bool(self._client.set(f"lock:{name}", "1", nx=True, ex=ttl))

    def release_lock(self, name: str) -> None:
        self._client.delete(f"lock:{name}")

    def ping(self) -> bool:
        try:
            return bool(self._client.ping())
        except redis.RedisError:
            return False
