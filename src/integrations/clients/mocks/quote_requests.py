"""
Mock Quote Request Client.

Purpose:
- Stands in for the quote-request endpoint during development and testing
- Does NOT make network calls
- Records every submitted payload so tests can assert on what was sent

Behavior guidelines:
- submit_quote_request(...) returns a 201 receipt with a sequential id
- fail_with(...) makes following submissions raise QuoteSubmissionError until cleared

Swap:
Replaced by clients/real_http/quote_requests.py when QUOTE_REQUESTS_API_URL is set.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Dict, List, Optional

from src.integrations.contracts.interfaces import (
    QuoteRequestClient,
    QuoteSubmissionError,
    QuoteSubmissionReceipt,
)

logger = logging.getLogger(__name__)


class MockQuoteRequestClient(QuoteRequestClient):
    def __init__(self) -> None:
        self.submissions: List[Dict[str, Any]] = []
        self.attempts = 0
        self._failure: Optional[QuoteSubmissionError] = None

    def fail_with(self, status_code: Optional[int] = 500, message: str = "Failed to submit quote request") -> None:
        self._failure = QuoteSubmissionError(message, status_code=status_code)

    def succeed(self) -> None:
        self._failure = None

    async def submit_quote_request(self, payload: Dict[str, Any]) -> QuoteSubmissionReceipt:
        self.attempts += 1
        if self._failure is not None:
            logger.info("[MockQuoteRequests] simulated failure status=%s", self._failure.status_code)
            raise self._failure

        self.submissions.append(copy.deepcopy(payload))
        request_id = len(self.submissions)
        logger.info("[MockQuoteRequests] accepted submission id=%s coverage_type=%s", request_id, payload.get("coverageType"))
        return QuoteSubmissionReceipt(status_code=201, body={"id": request_id, **payload})
