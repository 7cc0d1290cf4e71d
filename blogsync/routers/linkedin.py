"""LinkedIn OAuth helper endpoints.

A one-time flow for obtaining the access token and person URN that go into
``LINKEDIN_ACCESS_TOKEN`` and ``LINKEDIN_PERSON_URN``.
"""

import secrets
from typing import Annotated, Any

from fastapi import APIRouter, Cookie, Depends, HTTPException, Request, Response, status
from fastapi.responses import RedirectResponse

from blogsync.core.errors import TransportError
from blogsync.core.logging import get_logger
from blogsync.core.settings import Settings, get_settings
from blogsync.services.linkedin_api import (
    build_oauth_authorize_url,
    exchange_oauth_code,
    fetch_person_id,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/api/linkedin", tags=["linkedin"])

SECONDS_PER_DAY = 86400
STATE_COOKIE = "linkedin_oauth_state"
STATE_COOKIE_MAX_AGE = 600


def _callback_url(request: Request) -> str:
    return f"{request.base_url}api/linkedin/callback"


@router.get("/auth")
def linkedin_auth(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
) -> RedirectResponse:
    """Redirect to the LinkedIn consent screen."""
    if not settings.linkedin_client_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="LINKEDIN_CLIENT_ID not configured",
        )
    state = secrets.token_urlsafe(16)
    url = build_oauth_authorize_url(
        client_id=settings.linkedin_client_id,
        redirect_uri=_callback_url(request),
        state=state,
    )
    response = RedirectResponse(url=url)
    # Echoed back by LinkedIn; the callback only accepts a matching value
    response.set_cookie(
        STATE_COOKIE,
        state,
        max_age=STATE_COOKIE_MAX_AGE,
        httponly=True,
        samesite="lax",
        secure=request.url.scheme == "https",
    )
    return response


@router.get("/callback")
def linkedin_callback(
    request: Request,
    response: Response,
    settings: Annotated[Settings, Depends(get_settings)],
    code: str | None = None,
    state: str | None = None,
    error: str | None = None,
    error_description: str | None = None,
    expected_state: Annotated[str | None, Cookie(alias=STATE_COOKIE)] = None,
) -> dict[str, Any]:
    """Exchange the authorization code and report the credentials to configure."""
    if error:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"LinkedIn auth error: {error_description or error}",
        )
    if not code:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No code received")
    if not state or not expected_state or not secrets.compare_digest(state, expected_state):
        logger.warning("[LinkedIn] OAuth callback rejected: state mismatch")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid OAuth state. Start again from /api/linkedin/auth.",
        )
    if not settings.linkedin_client_id or not settings.linkedin_client_secret:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="LINKEDIN_CLIENT_ID or LINKEDIN_CLIENT_SECRET not configured",
        )

    try:
        token = exchange_oauth_code(
            code=code,
            redirect_uri=_callback_url(request),
            client_id=settings.linkedin_client_id,
            client_secret=settings.linkedin_client_secret,
        )
    except TransportError as exc:
        logger.error(f"[LinkedIn] OAuth callback failed: {exc}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    # The code is single-use, so a failed profile lookup still returns the token
    try:
        person_id = fetch_person_id(token["access_token"])
    except TransportError as exc:
        logger.warning(f"[LinkedIn] Could not fetch person id: {exc}")
        person_id = ""

    response.delete_cookie(STATE_COOKIE)
    expires_in = int(token.get("expires_in") or 0)
    return {
        "message": "LinkedIn connected. Add these to your environment:",
        "LINKEDIN_ACCESS_TOKEN": token["access_token"],
        "LINKEDIN_PERSON_URN": person_id,
        "token_type": token.get("token_type", "Bearer"),
        "expires_in_days": expires_in // SECONDS_PER_DAY,
        "note": "Tokens expire. Visit /api/linkedin/auth again to refresh.",
    }
