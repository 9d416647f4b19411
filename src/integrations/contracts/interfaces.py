from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class TrainingStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class QuoteSubmissionError(Exception):
    """The quote-request endpoint was unreachable or answered with a non-2xx status."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class TrainingProgressError(Exception):
    """A training-progress read or write failed."""


# ---------------------------------------------------------------------------
# Shared data models
# ---------------------------------------------------------------------------

@dataclass
class QuoteSubmissionReceipt:
    status_code: int
    body: Dict[str, Any] = field(default_factory=dict)
    submitted_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def request_id(self) -> Optional[str]:
        value = self.body.get("id")
        return None if value is None else str(value)


# ---------------------------------------------------------------------------
# Abstract client interfaces
# ---------------------------------------------------------------------------

class QuoteRequestClient(ABC):
    """Every quote-request submission client (mock or real) must implement this interface."""

    @abstractmethod
    async def submit_quote_request(self, payload: Dict[str, Any]) -> QuoteSubmissionReceipt:
        """POST one complete intake record. Raise QuoteSubmissionError on any failure."""


class TrainingProgressClient(ABC):
    """Persists training-module progress updates."""

    @abstractmethod
    async def save_progress(self, update: Dict[str, Any]) -> Dict[str, Any]:
        """Write one progress update. Raise TrainingProgressError on failure."""

    @abstractmethod
    async def get_progress(self, module_id: str, agent_id: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """Return the stored progress row for a module, or None when nothing was saved yet."""
