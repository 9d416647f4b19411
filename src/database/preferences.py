"""
Per-visitor preference store (dismissed banners, newsletter subscription flag, theme,
auth token, ...).

Lifecycle: values are set on a user action, read when a component mounts and all of
them are cleared on logout. The backend is injected (in-memory or Redis cache) so
callers never depend on a particular persistence layer.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

logger = logging.getLogger(__name__)


class PreferenceStore:
    def __init__(self, backend, namespace: str, ttl: Optional[int] = None) -> None:
        if not namespace:
            raise ValueError("namespace is required")
        self.backend = backend
        self.namespace = namespace
        self.ttl = ttl

    def _key(self, key: str) -> str:
        return f"prefs:{self.namespace}:{key}"

    def get(self, key: str, default: Any = None) -> Any:
        value = self.backend.get_value(self._key(key))
        return default if value is None else value

    def set(self, key: str, value: Any) -> None:
        if value is None:
            self.clear(key)
            return
        self.backend.set_value(self._key(key), value, ttl=self.ttl)

    def clear(self, key: str) -> None:
        self.backend.delete_value(self._key(key))

    def clear_all(self) -> int:
        """Drop every preference in this namespace (logout)."""
        removed = self.backend.delete_prefix(f"prefs:{self.namespace}:")
        logger.info("[Preferences] cleared %s value(s) for namespace=%s", removed, self.namespace)
        return removed
