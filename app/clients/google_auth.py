"""
Google OAuth utilities.

These helpers manage the consent redirect and the token exchange/refresh calls
against Google's token endpoint.
"""

from __future__ import annotations

from typing import Optional, Tuple
from urllib.parse import urlencode

import httpx

from fastapi import status

from app.core.config import GoogleSettings, OAuthSettings


class OAuthTokenExchangeError(Exception):
    """Raised when the token endpoint fails or returns an unusable payload."""


class GoogleOAuthClient:
    """Build Google authorization URLs and exchange authorization codes."""

    AUTH_BASE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
    TOKEN_URL = "https://oauth2.googleapis.com/token"

    def __init__(
        self,
        google_settings: GoogleSettings,
        oauth_settings: OAuthSettings,
        *,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._google = google_settings
        self._oauth = oauth_settings
        self._timeout = timeout
        self._transport = transport

    @property
    def scopes(self) -> tuple[str, ...]:
        return tuple(self._oauth.scopes)

    def build_authorization_url(self, access_type: str = "offline") -> str:
        """Construct the Google OAuth consent URL."""
        params = {
            "client_id": self._google.client_id,
            "redirect_uri": str(self._google.redirect_uri),
            "response_type": "code",
            "scope": " ".join(self._oauth.scopes),
            "access_type": access_type,
            "include_granted_scopes": "true",
            "prompt": "consent",
        }
        query = urlencode(params)
        return f"{self.AUTH_BASE_URL}?{query}"

    async def exchange_authorization_code(
        self, code: str
    ) -> Tuple[str, Optional[str], Optional[int]]:
        """
        Exchange an authorization code for tokens.

        Returns a tuple of (access_token, refresh_token, expires_in_seconds).
        Google omits the refresh token when the user already granted offline
        access without a fresh consent prompt.
        """
        payload = {
            "code": code,
            "client_id": self._google.client_id,
            "client_secret": self._google.client_secret,
            "redirect_uri": str(self._google.redirect_uri),
            "grant_type": "authorization_code",
        }

        token_payload = await self._post_token_request(payload)
        access_token = token_payload.get("access_token")
        refresh_token = token_payload.get("refresh_token")
        expires_in = token_payload.get("expires_in")

        if not access_token:
            raise OAuthTokenExchangeError("Incomplete token payload returned from Google.")

        return access_token, refresh_token, _coerce_expires_in(expires_in)

    async def refresh_token(self, refresh_token: str) -> Tuple[str, Optional[int]]:
        """Refresh the access token using a stored refresh token."""
        payload = {
            "client_id": self._google.client_id,
            "client_secret": self._google.client_secret,
            "refresh_token": refresh_token,
            "grant_type": "refresh_token",
        }

        token_payload = await self._post_token_request(payload)
        access_token = token_payload.get("access_token")
        expires_in = token_payload.get("expires_in")

        if not access_token:
            raise OAuthTokenExchangeError("Incomplete refresh payload returned from Google.")

        return access_token, _coerce_expires_in(expires_in)

    async def _post_token_request(self, payload: dict) -> dict:
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.post(self.TOKEN_URL, data=payload)
        except httpx.HTTPError as exc:
            raise OAuthTokenExchangeError(f"Token endpoint unreachable: {exc}") from exc

        if response.status_code != status.HTTP_200_OK:
            raise OAuthTokenExchangeError(response.text)

        try:
            token_payload = response.json()
        except ValueError as exc:
            raise OAuthTokenExchangeError("Token endpoint returned malformed JSON.") from exc

        if not isinstance(token_payload, dict):
            raise OAuthTokenExchangeError("Token endpoint returned an unexpected payload.")
        return token_payload


def _coerce_expires_in(value: object) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise OAuthTokenExchangeError(f"Invalid expires_in value: {value!r}") from exc


__all__ = [
    "GoogleOAuthClient",
    "OAuthTokenExchangeError",
]
