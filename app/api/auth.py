"""
Browser-facing OAuth routes for connecting the YouTube channel.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse, RedirectResponse, Response

from app.clients import DocumentStoreError, GoogleOAuthClient, OAuthTokenExchangeError
from app.dependencies import (
    SettingsDependency,
    get_credential_store,
    get_google_oauth_client,
    get_token_manager,
)
from app.services import CredentialStore, TokenManager

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/login")
async def login(
    oauth_client: Annotated[GoogleOAuthClient, Depends(get_google_oauth_client)],
) -> RedirectResponse:
    """Send the browser to Google's consent screen requesting offline access."""
    authorization_url = oauth_client.build_authorization_url(access_type="offline")
    return RedirectResponse(url=authorization_url, status_code=HTTPStatus.FOUND)


@router.get("/oauth2callback")
async def oauth2_callback(
    settings: SettingsDependency,
    oauth_client: Annotated[GoogleOAuthClient, Depends(get_google_oauth_client)],
    token_manager: Annotated[TokenManager, Depends(get_token_manager)],
    credential_store: Annotated[CredentialStore, Depends(get_credential_store)],
    code: str = Query(..., min_length=1, description="Authorization code returned by Google."),
) -> Response:
    """Exchange the authorization code and hand the tokens to the token manager."""
    try:
        access_token, refresh_token, expires_in = await oauth_client.exchange_authorization_code(
            code
        )
    except OAuthTokenExchangeError as exc:
        logger.error("Error exchanging code for tokens: %s", exc)
        return PlainTextResponse(
            "Authentication failed", status_code=HTTPStatus.INTERNAL_SERVER_ERROR
        )

    await token_manager.set_tokens(
        access_token=access_token,
        refresh_token=refresh_token,
        expires_in=expires_in,
    )
    logger.info(
        "OAuth callback completed (refresh token %s)",
        "received" if refresh_token else "not returned",
    )

    if refresh_token:
        try:
            credential_store.save_refresh_token(refresh_token)
        except DocumentStoreError as exc:
            # The in-memory token still works until the process restarts.
            logger.warning("Could not persist refresh token: %s", exc)

    return RedirectResponse(url=settings.dashboard_url, status_code=HTTPStatus.FOUND)


__all__ = ["router"]
