"""
APIRouter for per-visitor preferences (dismissed banners, newsletter flag, theme, ...).

Endpoints:
- GET    /preferences/{visitor_id}/{key}
- PUT    /preferences/{visitor_id}/{key}
- DELETE /preferences/{visitor_id}/{key}
- POST   /preferences/{visitor_id}/logout

The session context dependency picks up `visitor_id` from the path, so its preference
store is namespaced to the visitor.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends

from src.api.main import get_session_context


api = APIRouter()


@api.get("/preferences/{visitor_id}/{key}", tags=["Preferences"])
def get_preference(visitor_id: str, key: str, ctx=Depends(get_session_context)):
    return {"key": key, "value": ctx.preferences.get(key)}


@api.put("/preferences/{visitor_id}/{key}", tags=["Preferences"])
def set_preference(visitor_id: str, key: str, value: Any = Body(..., embed=True), ctx=Depends(get_session_context)):
    """Body: { "value": ... }; a null value clears the preference."""
    ctx.preferences.set(key, value)
    return {"key": key, "value": value}


@api.delete("/preferences/{visitor_id}/{key}", tags=["Preferences"])
def clear_preference(visitor_id: str, key: str, ctx=Depends(get_session_context)):
    ctx.preferences.clear(key)
    return {"key": key, "cleared": True}


@api.post("/preferences/{visitor_id}/logout", tags=["Preferences"])
def logout(visitor_id: str, ctx=Depends(get_session_context)):
    """Drop every stored preference for the visitor."""
    removed = ctx.close(logout=True)
    return {"visitor_id": visitor_id, "cleared": removed}
