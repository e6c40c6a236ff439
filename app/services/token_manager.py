"""
Lazy access-token lifecycle for the single connected Google account.

The manager owns the token state outright. Reads that may lead to a refresh are
serialized behind one lock, so concurrent requests that all see an expired
token produce a single call to Google's token endpoint.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Callable, Optional, Protocol, Tuple

import httpx
from google.oauth2.credentials import Credentials

from app.clients.google_auth import OAuthTokenExchangeError

logger = logging.getLogger(__name__)


class TokenRefresher(Protocol):
    async def refresh_token(self, refresh_token: str) -> Tuple[str, Optional[int]]:
        ...


class TokenStatus(str, Enum):
    NO_TOKEN = "NO_TOKEN"
    VALID = "VALID"
    EXPIRED = "EXPIRED"


@dataclass(frozen=True)
class TokenState:
    """Snapshot of the credentials held in memory."""

    refresh_token: Optional[str] = None
    access_token: Optional[str] = None
    expiry: Optional[datetime] = None

    def status(self, now: datetime) -> TokenStatus:
        if not self.access_token:
            return TokenStatus.NO_TOKEN
        # Without a recorded expiry the token is trusted until a call fails.
        if self.expiry is not None and now >= self.expiry:
            return TokenStatus.EXPIRED
        return TokenStatus.VALID


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TokenManager:
    """Keeps a usable access token available for outbound YouTube calls."""

    def __init__(
        self,
        oauth_client: TokenRefresher,
        *,
        refresh_token: Optional[str] = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._oauth = oauth_client
        self._state = TokenState(refresh_token=refresh_token)
        self._lock = asyncio.Lock()
        self._clock = clock

    @property
    def state(self) -> TokenState:
        return self._state

    @property
    def status(self) -> TokenStatus:
        return self._state.status(self._clock())

    @property
    def has_refresh_token(self) -> bool:
        return bool(self._state.refresh_token)

    async def ensure_valid_token(self) -> bool:
        """Refresh the access token when it is missing or past its expiry.

        Returns ``True`` when a usable access token is held afterwards.
        """
        async with self._lock:
            if self._state.status(self._clock()) is TokenStatus.VALID:
                return True
            logger.info("Access token expired or missing, refreshing")
            return await self._refresh_locked()

    async def refresh_access_token(self) -> bool:
        """Exchange the refresh token for a new access token unconditionally."""
        async with self._lock:
            return await self._refresh_locked()

    async def set_tokens(
        self,
        *,
        access_token: str,
        refresh_token: Optional[str] = None,
        expires_in: Optional[int] = None,
    ) -> None:
        """Install tokens obtained from the OAuth authorization-code exchange."""
        async with self._lock:
            self._state = TokenState(
                refresh_token=refresh_token or self._state.refresh_token,
                access_token=access_token,
                expiry=self._expiry_from(expires_in),
            )

    def credentials(self) -> Credentials:
        """Google credentials carrying only the current access token.

        Refreshing stays with this manager.
        """
        return Credentials(token=self._state.access_token)

    async def _refresh_locked(self) -> bool:
        refresh_token = self._state.refresh_token
        if not refresh_token:
            logger.warning("Cannot refresh access token: no refresh token available")
            return False

        try:
            access_token, expires_in = await self._oauth.refresh_token(refresh_token)
        except (OAuthTokenExchangeError, httpx.HTTPError) as exc:
            logger.error("Failed to refresh access token: %s", exc)
            return False

        self._state = TokenState(
            refresh_token=refresh_token,
            access_token=access_token,
            expiry=self._expiry_from(expires_in),
        )
        logger.info("Access token refreshed")
        return True

    def _expiry_from(self, expires_in: Optional[int]) -> Optional[datetime]:
        if expires_in is None:
            return None
        return self._clock() + timedelta(seconds=expires_in)


__all__ = ["TokenManager", "TokenState", "TokenStatus"]
