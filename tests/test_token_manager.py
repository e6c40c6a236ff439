from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone

import httpx
import pytest

from app.clients.google_auth import OAuthTokenExchangeError
from app.services.token_manager import TokenManager, TokenState, TokenStatus

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, now: datetime = NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class DummyOAuthClient:
    def __init__(self, *, expires_in: int | None = 3600, error: Exception | None = None) -> None:
        self.expires_in = expires_in
        self.error = error
        self.calls: list[str] = []

    async def refresh_token(self, refresh_token: str) -> tuple[str, int | None]:
        self.calls.append(refresh_token)
        await asyncio.sleep(0)
        if self.error is not None:
            raise self.error
        return f"access-{len(self.calls)}", self.expires_in


@pytest.mark.asyncio
async def test_missing_access_token_triggers_single_refresh() -> None:
    oauth = DummyOAuthClient()
    clock = FakeClock()
    manager = TokenManager(oauth, refresh_token="refresh-1", clock=clock)
    assert manager.status is TokenStatus.NO_TOKEN

    assert await manager.ensure_valid_token() is True

    assert oauth.calls == ["refresh-1"]
    assert manager.state.access_token == "access-1"
    assert manager.state.expiry == NOW + timedelta(seconds=3600)
    assert manager.status is TokenStatus.VALID


@pytest.mark.asyncio
async def test_future_expiry_does_not_refresh() -> None:
    oauth = DummyOAuthClient()
    clock = FakeClock()
    manager = TokenManager(oauth, refresh_token="refresh-1", clock=clock)
    await manager.set_tokens(access_token="current", expires_in=600)

    assert await manager.ensure_valid_token() is True
    assert oauth.calls == []
    assert manager.state.access_token == "current"


@pytest.mark.asyncio
async def test_past_expiry_triggers_refresh() -> None:
    oauth = DummyOAuthClient()
    clock = FakeClock()
    manager = TokenManager(oauth, refresh_token="refresh-1", clock=clock)
    await manager.set_tokens(access_token="stale", expires_in=600)

    clock.now = NOW + timedelta(seconds=600)
    assert manager.status is TokenStatus.EXPIRED

    assert await manager.ensure_valid_token() is True
    assert oauth.calls == ["refresh-1"]
    assert manager.state.access_token == "access-1"


@pytest.mark.asyncio
async def test_token_without_expiry_is_trusted() -> None:
    oauth = DummyOAuthClient()
    clock = FakeClock()
    manager = TokenManager(oauth, refresh_token="refresh-1", clock=clock)
    await manager.set_tokens(access_token="forever")

    clock.now = NOW + timedelta(days=365)
    assert await manager.ensure_valid_token() is True
    assert oauth.calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [
        OAuthTokenExchangeError('{"error": "invalid_grant"}'),
        httpx.ConnectError("connection refused"),
    ],
)
async def test_refresh_failure_returns_false_and_keeps_state(error: Exception) -> None:
    oauth = DummyOAuthClient()
    clock = FakeClock()
    manager = TokenManager(oauth, refresh_token="refresh-1", clock=clock)
    await manager.set_tokens(access_token="stale", expires_in=60)
    clock.now = NOW + timedelta(minutes=5)
    before = manager.state

    oauth.error = error
    assert await manager.ensure_valid_token() is False

    assert manager.state == before
    assert manager.status is TokenStatus.EXPIRED


@pytest.mark.asyncio
async def test_failed_refresh_is_retried_on_next_call() -> None:
    oauth = DummyOAuthClient(error=OAuthTokenExchangeError("revoked"))
    manager = TokenManager(oauth, refresh_token="refresh-1", clock=FakeClock())

    assert await manager.ensure_valid_token() is False
    assert manager.status is TokenStatus.NO_TOKEN

    oauth.error = None
    assert await manager.ensure_valid_token() is True
    assert len(oauth.calls) == 2


@pytest.mark.asyncio
async def test_no_refresh_token_means_no_refresh_attempt() -> None:
    oauth = DummyOAuthClient()
    manager = TokenManager(oauth, clock=FakeClock())

    assert manager.has_refresh_token is False
    assert await manager.ensure_valid_token() is False
    assert oauth.calls == []


@pytest.mark.asyncio
async def test_concurrent_callers_share_one_refresh() -> None:
    oauth = DummyOAuthClient()
    manager = TokenManager(oauth, refresh_token="refresh-1", clock=FakeClock())

    results = await asyncio.gather(*(manager.ensure_valid_token() for _ in range(5)))

    assert results == [True] * 5
    assert oauth.calls == ["refresh-1"]


@pytest.mark.asyncio
async def test_set_tokens_keeps_existing_refresh_token_when_none_returned() -> None:
    manager = TokenManager(DummyOAuthClient(), refresh_token="original", clock=FakeClock())

    await manager.set_tokens(access_token="fresh", refresh_token=None, expires_in=3600)

    assert manager.state.refresh_token == "original"
    assert manager.credentials().token == "fresh"


def test_token_state_status_boundaries() -> None:
    assert TokenState().status(NOW) is TokenStatus.NO_TOKEN
    assert TokenState(access_token="a", expiry=NOW).status(NOW) is TokenStatus.EXPIRED
    assert (
        TokenState(access_token="a", expiry=NOW + timedelta(seconds=1)).status(NOW)
        is TokenStatus.VALID
    )
