"""
Session state management for quote intake wizards
"""

from typing import Any, Dict, Optional
from datetime import datetime
import logging
import uuid

from src.forms.flows.quote_intake import QuoteIntakeFlow
from src.integrations.contracts.interfaces import QuoteRequestClient
from src.utils.config_loader import IntakeConfig

logger = logging.getLogger(__name__)


def _session_key(session_id: str) -> str:
    return f"quote_intake:{session_id}"


def _submit_lock(session_id: str) -> str:
    return f"quote_intake_submit:{session_id}"


class StateManager:
    """Keeps wizard snapshots in the cache between requests; expiry drops the session."""

    def __init__(self, redis_cache, config: Optional[IntakeConfig] = None):
        self.redis = redis_cache
        self.config = config or IntakeConfig()

    @property
    def ttl(self) -> int:
        return self.config.session_ttl_seconds

    def create_session(self, flow: QuoteIntakeFlow) -> str:
        """Create new wizard session"""
        session_id = str(uuid.uuid4())
        self.save_session(session_id, flow)
        logger.info("[StateManager] created session=%s", session_id)
        return session_id

    def get_session(self, session_id: str) -> Optional[Dict[str, Any]]:
        """Get raw session data"""
        return self.redis.get_session(_session_key(session_id))

    def load_flow(self, session_id: str, client: QuoteRequestClient) -> Optional[QuoteIntakeFlow]:
        session = self.get_session(session_id)
        if not session:
            return None
        return QuoteIntakeFlow.restore(session, client, config=self.config)

    def save_session(self, session_id: str, flow: QuoteIntakeFlow) -> Dict[str, Any]:
        data = flow.snapshot()
        data["session_id"] = session_id
        data["updated_at"] = datetime.utcnow().isoformat()
        # Re-set on every write so the TTL counts from the last activity.
        self.redis.set_session(_session_key(session_id), data, ttl=self.ttl)
        return data

    def begin_submit(self, session_id: str) -> bool:
        """Take the per-session submit lock; False when another request (or worker) holds it."""
        acquired = self.redis.acquire_lock(_submit_lock(session_id), ttl=self.config.submit_lock_ttl_seconds)
        if not acquired:
            logger.info("[StateManager] submit already in flight session=%s", session_id)
        return acquired

    def end_submit(self, session_id: str) -> None:
        self.redis.release_lock(_submit_lock(session_id))

    def mark_submitting(self, session_id: str) -> None:
        self.redis.update_session(_session_key(session_id), {"submitting": True})

    def end_session(self, session_id: str) -> None:
        """End session and clean up"""
        self.redis.delete_session(_session_key(session_id))
