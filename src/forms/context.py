"""
Per-session context object.

Built once when a visitor session starts and handed to the components that need it,
instead of those components reaching for module-level globals.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import Optional

from src.database.preferences import PreferenceStore
from src.forms.flows.quote_intake import QuoteIntakeFlow
from src.integrations.contracts.interfaces import QuoteRequestClient
from src.utils.config_loader import QuoteConfig

logger = logging.getLogger(__name__)


@dataclass
class SessionContext:
    preferences: PreferenceStore
    quote_client: QuoteRequestClient
    config: QuoteConfig = field(default_factory=QuoteConfig)
    session_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    wizard: Optional[QuoteIntakeFlow] = None
    closed: bool = False

    @classmethod
    def create(
        cls,
        backend,
        quote_client: QuoteRequestClient,
        config: Optional[QuoteConfig] = None,
        visitor_id: Optional[str] = None,
    ) -> "SessionContext":
        session_id = str(uuid.uuid4())
        preferences = PreferenceStore(backend, namespace=visitor_id or session_id)
        return cls(
            preferences=preferences,
            quote_client=quote_client,
            config=config or QuoteConfig(),
            session_id=session_id,
        )

    def open_wizard(self, initial_data: Optional[dict] = None) -> QuoteIntakeFlow:
        """Start (or restart) the quote wizard for this session."""
        if self.closed:
            raise RuntimeError("Session context is closed")
        self.wizard = QuoteIntakeFlow(
            self.quote_client,
            config=self.config.intake,
            initial_data=initial_data,
        )
        return self.wizard

    def close(self, logout: bool = False) -> int:
        """Tear down the session; any unsubmitted intake record is dropped. Returns the preferences cleared."""
        if self.wizard is not None and not self.wizard.is_submitted:
            logger.info("[SessionContext] session=%s closed with unsubmitted quote request", self.session_id)
        self.wizard = None
        removed = self.preferences.clear_all() if logout else 0
        self.closed = True
        return removed
