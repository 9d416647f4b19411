"""
Integrations layer.
This package contains all code used to communicate with external systems such as:
- The quote-request intake API (wizard submissions)
- The agent portal training progress API

Key rule:
- Intake flows MUST NOT call external APIs directly.
- Flows should call integration clients (under src/integrations/clients).
- We use MOCK clients during development and swap to REAL_HTTP clients when APIs are available.

Switching implementations:
- The selection of mock vs real clients should happen in ONE place (src/api/main.py).
"""

from .contracts.interfaces import (
    QuoteRequestClient,
    QuoteSubmissionError,
    QuoteSubmissionReceipt,
    TrainingProgressClient,
    TrainingProgressError,
    TrainingStatus,
)
from .contracts.quote_requests import QuoteRequestPayload, format_height

__all__ = [
    # interfaces
    "QuoteRequestClient", "QuoteSubmissionError", "QuoteSubmissionReceipt",
    "TrainingProgressClient", "TrainingProgressError", "TrainingStatus",
    # quote requests
    "QuoteRequestPayload", "format_height",
]
