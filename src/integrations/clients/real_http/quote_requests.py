"""
Real Quote Request HTTP Client.

Used when QUOTE_REQUESTS_API_URL is configured. POSTs the complete intake record
as JSON; any 2xx response is a success, anything else (or a transport error) is
raised as QuoteSubmissionError. No retries.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

import httpx

from src.integrations.contracts.interfaces import (
    QuoteRequestClient,
    QuoteSubmissionError,
    QuoteSubmissionReceipt,
)

logger = logging.getLogger(__name__)


class RealQuoteRequestClient(QuoteRequestClient):
    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        path: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = (base_url or os.getenv("QUOTE_REQUESTS_API_URL", "")).rstrip("/")
        self.api_key = api_key or os.getenv("QUOTE_REQUESTS_API_KEY", "")
        self.path = path or os.getenv("QUOTE_REQUESTS_PATH", "/api/quote-requests")
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    def _client_kwargs(self) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {}
        # Leave httpx's default timeout alone unless one is configured.
        if self.timeout_seconds is not None:
            kwargs["timeout"] = self.timeout_seconds
        if self._transport is not None:
            kwargs["transport"] = self._transport
        return kwargs

    async def submit_quote_request(self, payload: Dict[str, Any]) -> QuoteSubmissionReceipt:
        if not self.base_url:
            raise ValueError("QUOTE_REQUESTS_API_URL is not configured.")

        headers: Dict[str, str] = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        url = f"{self.base_url}{self.path}"
        try:
            async with httpx.AsyncClient(**self._client_kwargs()) as client:
                response = await client.post(url, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            logger.warning("[QuoteRequests] network error posting to %s: %s", url, exc)
            raise QuoteSubmissionError("Failed to submit quote request") from exc

        if not response.is_success:
            logger.warning("[QuoteRequests] endpoint returned status=%s", response.status_code)
            raise QuoteSubmissionError("Failed to submit quote request", status_code=response.status_code)

        try:
            body = response.json() if response.content else {}
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {"data": body}

        logger.info("[QuoteRequests] submitted status=%s", response.status_code)
        return QuoteSubmissionReceipt(status_code=response.status_code, body=body)
