"""
Calendar service: Google OAuth code exchange and Calendar event insertion.

Business logic separated from HTTP layer. The code exchange posts to
Google's token endpoint with a timeout; event insertion builds google-auth
Credentials from the stored tokens and lets the client library refresh them.
Tokens refreshed during a call are handed back to the caller for persisting.
"""
import logging
from datetime import datetime, timedelta, UTC
from typing import Any

import requests
from google.auth.exceptions import RefreshError
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from config import Settings
from services.token_store import TokenStore

logger = logging.getLogger(__name__)

GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"
TOKEN_REQUEST_TIMEOUT = (5, 30)  # connect 5s, read 30s
PRIMARY_CALENDAR = "primary"


class CalendarNotConnected(Exception):
    """Raised when a user has no stored tokens."""

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(f"User {user_id} has not connected Google Calendar")


class CalendarError(Exception):
    """
    Raised when Google rejects a token exchange or a Calendar call.

    refreshed holds tokens the client library refreshed before the failure;
    they are still valid and must be persisted.
    """

    def __init__(self, msg: str, refreshed: dict[str, Any] | None = None):
        self.refreshed = refreshed
        super().__init__(msg)


def exchange_code(settings: Settings, code: str) -> dict[str, Any]:
    """
    Exchange an authorization code for tokens. Returns a token record ready
    for TokenStore.save_tokens; refresh_token is None when Google did not
    issue one (repeat consent), which keeps the stored one on merge.
    """
    try:
        resp = requests.post(
            GOOGLE_TOKEN_URI,
            data={
                "client_id": settings.google_client_id,
                "client_secret": settings.google_client_secret,
                "code": code,
                "grant_type": "authorization_code",
                "redirect_uri": settings.google_redirect_uri,
            },
            headers={"Content-Type": "application/x-www-form-urlencoded"},
            timeout=TOKEN_REQUEST_TIMEOUT,
        )
        token_data = resp.json()
    except (requests.RequestException, ValueError) as e:
        raise CalendarError(f"Token request failed: {e}") from e

    if "error" in token_data:
        raise CalendarError(
            f"Token exchange failed: {token_data.get('error_description', token_data['error'])}"
        )
    access_token = token_data.get("access_token")
    if not access_token:
        raise CalendarError("Token exchange did not return access_token")

    expires_in = token_data.get("expires_in", 3600)
    return {
        "access_token": access_token,
        "refresh_token": token_data.get("refresh_token"),
        "expires_at": datetime.now(UTC) + timedelta(seconds=expires_in),
        "scope": token_data.get("scope"),
        "token_type": token_data.get("token_type"),
    }


def connect_calendar(store: TokenStore, settings: Settings, user_id: str, code: str) -> None:
    """Disconnected -> Connected: exchange the code and persist the tokens."""
    tokens = exchange_code(settings, code)
    store.save_tokens(user_id, tokens)
    logger.info("Stored Google tokens for user %s", user_id)


def build_credentials(settings: Settings, tokens: dict[str, Any]) -> Credentials:
    # google-auth compares expiry against a naive UTC datetime
    expiry = tokens.get("expires_at")
    if isinstance(expiry, datetime) and expiry.tzinfo is not None:
        expiry = expiry.astimezone(UTC).replace(tzinfo=None)
    return Credentials(
        token=tokens.get("access_token"),
        refresh_token=tokens.get("refresh_token"),
        token_uri=GOOGLE_TOKEN_URI,
        client_id=settings.google_client_id,
        client_secret=settings.google_client_secret,
        expiry=expiry,
    )


def refreshed_tokens(creds: Credentials, stored: dict[str, Any]) -> dict[str, Any] | None:
    """Token record to persist if the client refreshed during the call, else None."""
    if creds.token == stored.get("access_token"):
        return None
    update = {"access_token": creds.token}
    if creds.expiry is not None:
        update["expires_at"] = creds.expiry.replace(tzinfo=UTC)
    if creds.refresh_token and creds.refresh_token != stored.get("refresh_token"):
        update["refresh_token"] = creds.refresh_token
    return update


def add_event(
    store: TokenStore,
    settings: Settings,
    user_id: str,
    event: dict[str, Any],
) -> tuple[dict, dict[str, Any] | None]:
    """
    Insert event into the user's primary calendar.

    Returns (created event, refreshed token record or None). Raises
    CalendarNotConnected if the user has no tokens, CalendarError if Google
    fails the refresh or the insert; tokens refreshed before an insert
    failure ride along on CalendarError.refreshed.
    """
    tokens = store.load_tokens(user_id)
    if not tokens:
        raise CalendarNotConnected(user_id)

    creds = build_credentials(settings, tokens)
    try:
        service = build("calendar", "v3", credentials=creds, cache_discovery=False)
        created = service.events().insert(calendarId=PRIMARY_CALENDAR, body=event).execute()
    except (HttpError, RefreshError) as e:
        raise CalendarError(
            f"Calendar insert failed: {e}",
            refreshed=refreshed_tokens(creds, tokens),
        ) from e

    logger.info("Calendar event %s created for user %s", created.get("id"), user_id)
    return created, refreshed_tokens(creds, tokens)
