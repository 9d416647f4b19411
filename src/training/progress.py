"""
Training module progress tracking for the agent portal.

Progress is reported as a percentage of (section, content) position, capped at 99 until
the module is explicitly completed. Position saves are throttled to one write per
configured interval; status changes (start, complete) always go through.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional

from src.integrations.contracts.interfaces import TrainingProgressClient, TrainingStatus
from src.utils.rate_limiter import WriteThrottle

logger = logging.getLogger(__name__)

MAX_IN_PROGRESS_PERCENT = 99


def compute_progress_percent(section_index: int, content_index: int, total_sections: int) -> int:
    if total_sections <= 0:
        return 0
    percent = round((section_index * 10 + content_index) / (total_sections * 10) * 100)
    return max(0, min(percent, MAX_IN_PROGRESS_PERCENT))


@dataclass
class ModuleProgress:
    module_id: str
    status: TrainingStatus = TrainingStatus.NOT_STARTED
    progress_percent: int = 0
    last_position: Optional[Dict[str, int]] = None
    time_spent_minutes: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ModuleProgress":
        return cls(
            module_id=str(data["moduleId"]),
            status=TrainingStatus(data.get("status") or TrainingStatus.NOT_STARTED.value),
            progress_percent=int(data.get("progressPercent") or 0),
            last_position=data.get("lastPosition"),
            time_spent_minutes=int(data.get("timeSpentMinutes") or 0),
        )


def completed_modules(progress: Iterable[ModuleProgress]) -> List[str]:
    return [p.module_id for p in progress if p.status == TrainingStatus.COMPLETED]


def in_progress_modules(progress: Iterable[ModuleProgress]) -> List[str]:
    return [p.module_id for p in progress if p.status == TrainingStatus.IN_PROGRESS]


def total_time_spent(progress: Iterable[ModuleProgress]) -> int:
    return sum(p.time_spent_minutes or 0 for p in progress)


class ModuleProgressTracker:
    """Tracks one open training module for one agent."""

    def __init__(
        self,
        module_id: str,
        client: TrainingProgressClient,
        progress: Optional[ModuleProgress] = None,
        throttle: Optional[WriteThrottle] = None,
        clock: Callable[[], float] = time.monotonic,
        agent_id: Optional[str] = None,
    ) -> None:
        self.module_id = module_id
        self.agent_id = agent_id
        self.client = client
        self.progress = progress or ModuleProgress(module_id=module_id)
        self._clock = clock
        self.throttle = throttle or WriteThrottle(5.0, clock=clock)
        self._started_at = clock()
        self._base_minutes = self.progress.time_spent_minutes

    @classmethod
    async def open(
        cls,
        module_id: str,
        client: TrainingProgressClient,
        throttle: Optional[WriteThrottle] = None,
        clock: Callable[[], float] = time.monotonic,
        agent_id: Optional[str] = None,
    ) -> "ModuleProgressTracker":
        """Build a tracker seeded with whatever progress the client already stores for the module."""
        stored = await client.get_progress(module_id, agent_id=agent_id)
        progress = ModuleProgress.from_dict({**stored, "moduleId": module_id}) if stored else None
        if progress is not None:
            logger.debug(
                "[TrainingProgress] loaded module=%s status=%s minutes=%s",
                module_id,
                progress.status.value,
                progress.time_spent_minutes,
            )
        return cls(module_id, client, progress=progress, throttle=throttle, clock=clock, agent_id=agent_id)

    def _elapsed_minutes(self) -> int:
        return math.floor((self._clock() - self._started_at) / 60)

    def _time_spent(self) -> int:
        return self._base_minutes + self._elapsed_minutes()

    async def _write(self, **fields: Any) -> None:
        update = {"moduleId": self.module_id, **fields}
        if self.agent_id:
            update["agentId"] = self.agent_id
        saved = await self.client.save_progress(update)
        merged = {"moduleId": self.module_id, **self._as_dict(), **fields, **(saved or {})}
        self.progress = ModuleProgress.from_dict(merged)

    def _as_dict(self) -> Dict[str, Any]:
        return {
            "status": self.progress.status.value,
            "progressPercent": self.progress.progress_percent,
            "lastPosition": self.progress.last_position,
            "timeSpentMinutes": self.progress.time_spent_minutes,
        }

    async def start_module(self) -> None:
        self._started_at = self._clock()
        self._base_minutes = self.progress.time_spent_minutes
        if self.progress.status == TrainingStatus.NOT_STARTED:
            await self._write(status=TrainingStatus.IN_PROGRESS.value)
            logger.info("[TrainingProgress] started module=%s", self.module_id)

    async def save_position(self, section_index: int, content_index: int, total_sections: int) -> bool:
        """Save the reader's position; returns False when the write was throttled."""
        if not self.throttle.try_acquire():
            return False
        await self._write(
            lastPosition={"sectionIndex": section_index, "contentIndex": content_index},
            progressPercent=compute_progress_percent(section_index, content_index, total_sections),
            timeSpentMinutes=self._time_spent(),
        )
        return True

    async def complete_module(self) -> None:
        await self._write(
            status=TrainingStatus.COMPLETED.value,
            progressPercent=100,
            timeSpentMinutes=self._time_spent(),
        )
        logger.info("[TrainingProgress] completed module=%s minutes=%s", self.module_id, self.progress.time_spent_minutes)

    async def close(self) -> bool:
        """Final time-spent write when the module is left while still in progress."""
        if self.progress.status != TrainingStatus.IN_PROGRESS or self._elapsed_minutes() <= 0:
            return False
        await self._write(timeSpentMinutes=self._time_spent())
        return True
