"""
Mock integration clients.

These clients return fake (but realistic) responses without calling any external API.
They are used when:
- QUOTE_REQUESTS_API_URL / TRAINING_PROGRESS_API_URL are not configured
- We want to test flows end-to-end without external dependencies

Mock clients must follow the SAME interface as real HTTP clients.
"""
from .quote_requests import MockQuoteRequestClient
from .training_progress import MockTrainingProgressClient

__all__ = ["MockQuoteRequestClient", "MockTrainingProgressClient"]
