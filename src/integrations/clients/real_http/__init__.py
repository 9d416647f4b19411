"""
Real HTTP integration clients.

These clients talk to the quote-request intake API and the training progress API
over httpx. They implement the same interfaces as the mock clients.

Switching:
The selection of mock vs real clients should happen in src/api/main.py only.
"""
from .quote_requests import RealQuoteRequestClient
from .training_progress import RealTrainingProgressClient

__all__ = ["RealQuoteRequestClient", "RealTrainingProgressClient"]
