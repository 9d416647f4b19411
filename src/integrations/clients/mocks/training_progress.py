"""
Mock Training Progress Client.

Keeps progress rows in memory keyed by agent and module id; no network calls.
"""

from __future__ import annotations

import copy
from typing import Any, Dict, List, Optional

from src.integrations.contracts.interfaces import TrainingProgressClient


def _row_key(module_id: str, agent_id: Optional[str]) -> str:
    return f"{agent_id}:{module_id}" if agent_id else module_id


class MockTrainingProgressClient(TrainingProgressClient):
    def __init__(self) -> None:
        self.writes: List[Dict[str, Any]] = []
        self.rows: Dict[str, Dict[str, Any]] = {}

    async def save_progress(self, update: Dict[str, Any]) -> Dict[str, Any]:
        self.writes.append(copy.deepcopy(update))
        key = _row_key(update["moduleId"], update.get("agentId"))
        row = self.rows.setdefault(key, {"moduleId": update["moduleId"]})
        row.update(update)
        return dict(row)

    async def get_progress(self, module_id: str, agent_id: Optional[str] = None) -> Optional[Dict[str, Any]]:
        row = self.rows.get(_row_key(module_id, agent_id))
        return copy.deepcopy(row) if row is not None else None
