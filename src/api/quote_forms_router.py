"""
APIRouter for the quote request wizard (step-based) with sessions kept in the cache.

Endpoints:
- POST /quote-forms/start
- GET  /quote-forms/{session_id}
- PUT  /quote-forms/{session_id}/steps/{step_index}
- POST /quote-forms/{session_id}/back
- POST /quote-forms/{session_id}/submit
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, status
from fastapi.responses import JSONResponse

from src.api.main import get_quote_client, get_session_context, get_state_manager
from src.forms.flows.quote_intake import QuoteIntakeFlow, WizardStateError
from src.forms.validation import FormValidationError

logger = logging.getLogger(__name__)

api = APIRouter()


def _validation_error(e: FormValidationError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail={"error": "validation_error", "message": e.message, "field_errors": e.field_errors},
    )


def _conflict(message: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail={"error": "invalid_state", "message": message})


def _load_flow(state_manager, client, session_id: str) -> QuoteIntakeFlow:
    flow = state_manager.load_flow(session_id, client)
    if flow is None:
        raise HTTPException(status_code=404, detail="Quote session not found")
    return flow


@api.post("/quote-forms/start", tags=["Quote Forms"])
def start_quote_form(
    body: Optional[Dict[str, Any]] = Body(default=None),
    state_manager=Depends(get_state_manager),
    ctx=Depends(get_session_context),
):
    """
    Open a new wizard session.
    Body (optional): { "initial_data": { "coverageAmount": "250000", ... } }
    Returns: { "session_id": "...", "current_step": "coverage_selection" }
    """
    initial_data = (body or {}).get("initial_data") or {}
    flow = ctx.open_wizard(initial_data)
    session_id = state_manager.create_session(flow)
    return {"session_id": session_id, "current_step": flow.current_step.value}


@api.get("/quote-forms/{session_id}", tags=["Quote Forms"])
def get_quote_form(session_id: str, state_manager=Depends(get_state_manager)):
    """Return the wizard snapshot or 404 if the session expired or never existed."""
    session = state_manager.get_session(session_id)
    if not session:
        raise HTTPException(status_code=404, detail="Quote session not found")
    return session


@api.put("/quote-forms/{session_id}/steps/{step_index}", tags=["Quote Forms"])
def update_quote_form_step(
    session_id: str,
    step_index: int,
    body: Dict[str, Any],
    state_manager=Depends(get_state_manager),
    client=Depends(get_quote_client),
):
    """
    Validate the fields of the current step and move on.
    step_index must be the session's current step; the final step is submitted, not advanced.
    """
    flow = _load_flow(state_manager, client, session_id)
    if step_index < 0 or step_index >= len(flow.STEPS):
        raise HTTPException(status_code=400, detail="Invalid step index")
    if flow.is_submitted:
        raise _conflict("Quote request already submitted")
    if step_index != flow.step_index:
        raise _conflict(f"Session is on step {flow.step_index}, not {step_index}")

    try:
        flow.advance(body)
    except FormValidationError as e:
        state_manager.save_session(session_id, flow)
        raise _validation_error(e)
    except WizardStateError as e:
        raise _conflict(str(e))

    return state_manager.save_session(session_id, flow)


@api.post("/quote-forms/{session_id}/back", tags=["Quote Forms"])
def quote_form_back(
    session_id: str,
    state_manager=Depends(get_state_manager),
    client=Depends(get_quote_client),
):
    flow = _load_flow(state_manager, client, session_id)
    try:
        flow.back()
    except WizardStateError as e:
        raise _conflict(str(e))
    return state_manager.save_session(session_id, flow)


@api.post("/quote-forms/{session_id}/submit", tags=["Quote Forms"])
async def submit_quote_form(
    session_id: str,
    body: Optional[Dict[str, Any]] = Body(default=None),
    state_manager=Depends(get_state_manager),
    client=Depends(get_quote_client),
):
    """
    Validate the whole record and POST it once.
    Returns 200 { status: "submitted", ... } or 502 { status: "error", ... } with the record kept.
    """
    if not state_manager.begin_submit(session_id):
        raise _conflict("Quote request submission in progress")
    try:
        # Loaded under the lock so a submit finished by another worker is seen here.
        flow = _load_flow(state_manager, client, session_id)
        if flow.is_submitted:
            raise _conflict("Quote request already submitted")
        # Holding the lock means a stored in-flight flag is left over from an aborted attempt.
        flow.submitting = False

        state_manager.mark_submitting(session_id)
        try:
            result = await flow.submit(body)
        except FormValidationError as e:
            raise _validation_error(e)
        except WizardStateError as e:
            raise _conflict(str(e))
        finally:
            state_manager.save_session(session_id, flow)
    finally:
        state_manager.end_submit(session_id)

    if result["status"] != "submitted":
        logger.info("[QuoteForms] submit failed session=%s", session_id)
        return JSONResponse(status_code=status.HTTP_502_BAD_GATEWAY, content=result)
    return result
