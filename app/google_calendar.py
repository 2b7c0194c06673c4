"""
Google Calendar router: connect (code exchange), add event, connection status.

Delegates to services.calendar_service. Tokens live in the app's TokenStore.
Tokens refreshed while adding an event are persisted after the response is
sent, or before the 500 when the insert fails afterwards; a failure there
is logged and does not affect the request.
"""
import logging
from typing import Any

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, Request
from pydantic import BaseModel, Field

from config import Settings, get_settings
from services.calendar_service import (
    CalendarError,
    CalendarNotConnected,
    add_event,
    connect_calendar,
)
from services.token_store import TokenStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["calendar"])


# --- Request models ---


class ExchangeCodeBody(BaseModel):
    """Authorization code from the frontend's Google popup, for one user."""
    code: str = Field(..., min_length=1)
    userId: str = Field(..., min_length=1, max_length=255)


class AddToCalendarBody(BaseModel):
    """A Calendar v3 event resource (summary, start, end, ...) for one user."""
    event: dict[str, Any]
    userId: str = Field(..., min_length=1, max_length=255)


def get_token_store(request: Request) -> TokenStore:
    return request.app.state.token_store


def _persist_refreshed(store: TokenStore, user_id: str, tokens: dict[str, Any]) -> None:
    try:
        store.save_tokens(user_id, tokens)
    except Exception:
        logger.exception("Could not persist refreshed tokens for user %s", user_id)


# --- Endpoints ---


@router.post("/exchange-code")
def exchange_code(
    body: ExchangeCodeBody,
    store: TokenStore = Depends(get_token_store),
    settings: Settings = Depends(get_settings),
):
    try:
        connect_calendar(store, settings, body.userId, body.code)
    except Exception:
        # Provider and token store faults alike
        logger.exception("Error exchanging code for user %s", body.userId)
        raise HTTPException(status_code=500, detail="Failed to exchange code")
    return {"message": "Tokens saved successfully"}


@router.post("/add-to-calendar")
def add_to_calendar(
    body: AddToCalendarBody,
    background_tasks: BackgroundTasks,
    store: TokenStore = Depends(get_token_store),
    settings: Settings = Depends(get_settings),
):
    """
    Insert body.event into the user's primary calendar. 409 if the user has
    not connected Google Calendar yet.
    """
    try:
        created, refreshed = add_event(store, settings, body.userId, body.event)
    except CalendarNotConnected:
        raise HTTPException(status_code=409, detail="Calendar not connected")
    except CalendarError as e:
        logger.exception("Error adding calendar event for user %s", body.userId)
        # Background tasks do not run for error responses
        if e.refreshed:
            _persist_refreshed(store, body.userId, e.refreshed)
        raise HTTPException(status_code=500, detail="Failed to add event to calendar")
    except Exception:
        logger.exception("Token store error adding calendar event for user %s", body.userId)
        raise HTTPException(status_code=500, detail="Failed to add event to calendar")

    if refreshed:
        background_tasks.add_task(_persist_refreshed, store, body.userId, refreshed)
    return {"message": "Calendar event added successfully", "response": created}


@router.get("/check-connection-status")
def check_connection_status(
    user_id: str = Query(..., alias="userId", min_length=1),
    store: TokenStore = Depends(get_token_store),
):
    try:
        connected = store.has_tokens(user_id)
    except Exception:
        logger.exception("Error fetching tokens for user %s", user_id)
        raise HTTPException(status_code=500, detail="Failed to check connection status")
    return {"connectionStatus": connected}
