"""
Real Training Progress HTTP Client.

Reads and writes module progress through the portal's /api/training/progress endpoint.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

import httpx

from src.integrations.contracts.interfaces import TrainingProgressClient, TrainingProgressError

logger = logging.getLogger(__name__)


def _json_body(response: httpx.Response) -> Dict[str, Any]:
    try:
        data = response.json() if response.content else {}
    except ValueError:
        data = {}
    return data if isinstance(data, dict) else {"data": data}


class RealTrainingProgressClient(TrainingProgressClient):
    def __init__(
        self,
        base_url: Optional[str] = None,
        auth_token: Optional[str] = None,
        path: str = "/api/training/progress",
        timeout_seconds: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = (base_url or os.getenv("TRAINING_PROGRESS_API_URL", "")).rstrip("/")
        self.auth_token = auth_token
        self.path = path
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    def _headers(self) -> Dict[str, str]:
        if not self.base_url:
            raise ValueError("TRAINING_PROGRESS_API_URL is not configured.")
        headers: Dict[str, str] = {"Content-Type": "application/json"}
        if self.auth_token:
            headers["Authorization"] = f"Bearer {self.auth_token}"
        return headers

    async def save_progress(self, update: Dict[str, Any]) -> Dict[str, Any]:
        headers = self._headers()
        url = f"{self.base_url}{self.path}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self._transport) as client:
                response = await client.post(url, json=update, headers=headers)
                response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("[TrainingProgress] failed to save progress for module=%s: %s", update.get("moduleId"), exc)
            raise TrainingProgressError("Failed to update progress") from exc

        return _json_body(response)

    async def get_progress(self, module_id: str, agent_id: Optional[str] = None) -> Optional[Dict[str, Any]]:
        headers = self._headers()
        url = f"{self.base_url}{self.path}/{module_id}"
        params = {"agentId": agent_id} if agent_id else None
        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self._transport) as client:
                response = await client.get(url, params=params, headers=headers)
                if response.status_code == 404:
                    return None
                response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("[TrainingProgress] failed to fetch progress for module=%s: %s", module_id, exc)
            raise TrainingProgressError("Failed to fetch module progress") from exc

        data = _json_body(response)
        return data or None
