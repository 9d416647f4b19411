"""
APIRouter for agent training module progress.

Endpoints:
- POST /training/{agent_id}/modules/{module_id}/start
- POST /training/{agent_id}/modules/{module_id}/position
- POST /training/{agent_id}/modules/{module_id}/complete
- POST /training/{agent_id}/modules/{module_id}/close

One tracker is kept per open (agent, module) so that position saves share the same
write throttle. Trackers are seeded from the stored progress row, dropped on complete
or close, and the least recently used ones are evicted past
`training.max_open_trackers`.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from dataclasses import asdict
from typing import Tuple

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from src.api.main import get_config, get_training_client
from src.integrations.contracts.interfaces import TrainingProgressError
from src.training.progress import ModuleProgressTracker
from src.utils.rate_limiter import WriteThrottle

logger = logging.getLogger(__name__)

api = APIRouter()

_trackers: "OrderedDict[Tuple[str, str], ModuleProgressTracker]" = OrderedDict()


class PositionRequest(BaseModel):
    section_index: int = Field(..., ge=0)
    content_index: int = Field(..., ge=0)
    total_sections: int = Field(..., ge=0)


async def _tracker(agent_id: str, module_id: str, client, config) -> ModuleProgressTracker:
    key = (agent_id, module_id)
    tracker = _trackers.get(key)
    if tracker is not None:
        _trackers.move_to_end(key)
        return tracker

    throttle = WriteThrottle(config.training.min_save_interval_seconds)
    tracker = await ModuleProgressTracker.open(module_id, client, throttle=throttle, agent_id=agent_id)
    _trackers[key] = tracker
    while len(_trackers) > config.training.max_open_trackers:
        (old_agent, old_module), _ = _trackers.popitem(last=False)
        logger.info("[TrainingProgress] evicted idle tracker agent=%s module=%s", old_agent, old_module)
    return tracker


def _progress(tracker: ModuleProgressTracker) -> dict:
    data = asdict(tracker.progress)
    data["status"] = tracker.progress.status.value
    return data


def _upstream_error(e: TrainingProgressError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail={"error": "upstream_error", "message": str(e)})


@api.post("/training/{agent_id}/modules/{module_id}/start", tags=["Training"])
async def start_module(agent_id: str, module_id: str, client=Depends(get_training_client), config=Depends(get_config)):
    try:
        tracker = await _tracker(agent_id, module_id, client, config)
        await tracker.start_module()
    except TrainingProgressError as e:
        raise _upstream_error(e)
    return _progress(tracker)


@api.post("/training/{agent_id}/modules/{module_id}/position", tags=["Training"])
async def save_position(
    agent_id: str,
    module_id: str,
    body: PositionRequest,
    client=Depends(get_training_client),
    config=Depends(get_config),
):
    try:
        tracker = await _tracker(agent_id, module_id, client, config)
        saved = await tracker.save_position(body.section_index, body.content_index, body.total_sections)
    except TrainingProgressError as e:
        raise _upstream_error(e)
    return {"saved": saved, "progress": _progress(tracker)}


@api.post("/training/{agent_id}/modules/{module_id}/complete", tags=["Training"])
async def complete_module(agent_id: str, module_id: str, client=Depends(get_training_client), config=Depends(get_config)):
    try:
        tracker = await _tracker(agent_id, module_id, client, config)
        await tracker.complete_module()
    except TrainingProgressError as e:
        raise _upstream_error(e)
    # A completed module takes no further writes.
    _trackers.pop((agent_id, module_id), None)
    return _progress(tracker)


@api.post("/training/{agent_id}/modules/{module_id}/close", tags=["Training"])
async def close_module(agent_id: str, module_id: str, client=Depends(get_training_client)):
    tracker = _trackers.pop((agent_id, module_id), None)
    if tracker is None:
        return {"saved": False}
    try:
        saved = await tracker.close()
    except TrainingProgressError as e:
        raise _upstream_error(e)
    return {"saved": saved, "progress": _progress(tracker)}
