"""YouTube Data API v3 client wrapper."""

from __future__ import annotations

import asyncio
from typing import Any, Dict, Optional

import httplib2
from google.oauth2.credentials import Credentials
from google_auth_httplib2 import AuthorizedHttp
from googleapiclient.discovery import build


class YouTubeClient:
    """Run YouTube Data API calls off the event loop.

    Every method raises ``googleapiclient.errors.HttpError`` when the API
    rejects the request.
    """

    def __init__(self, service_factory=None) -> None:
        self._service_factory = service_factory or _build_service

    async def get_video(
        self, credentials: Credentials, video_id: str, *, part: str = "snippet,statistics"
    ) -> Optional[Dict[str, Any]]:
        """Return the video resource, or ``None`` when no such video exists."""

        def _execute() -> Optional[Dict[str, Any]]:
            service = self._service_factory(credentials)
            response = service.videos().list(part=part, id=video_id).execute()
            items = response.get("items") or []
            return items[0] if items else None

        return await asyncio.to_thread(_execute)

    async def update_video_snippet(
        self, credentials: Credentials, video_id: str, snippet: Dict[str, Any]
    ) -> Dict[str, Any]:
        def _execute() -> Dict[str, Any]:
            service = self._service_factory(credentials)
            return (
                service.videos()
                .update(part="snippet", body={"id": video_id, "snippet": snippet})
                .execute()
            )

        return await asyncio.to_thread(_execute)

    async def insert_comment_thread(
        self, credentials: Credentials, video_id: str, text: str
    ) -> Dict[str, Any]:
        """Post a new top-level comment on a video."""

        def _execute() -> Dict[str, Any]:
            service = self._service_factory(credentials)
            body = {
                "snippet": {
                    "videoId": video_id,
                    "topLevelComment": {"snippet": {"textOriginal": text}},
                }
            }
            return service.commentThreads().insert(part="snippet", body=body).execute()

        return await asyncio.to_thread(_execute)

    async def get_comment(
        self, credentials: Credentials, comment_id: str
    ) -> Optional[Dict[str, Any]]:
        def _execute() -> Optional[Dict[str, Any]]:
            service = self._service_factory(credentials)
            response = service.comments().list(part="id", id=comment_id).execute()
            items = response.get("items") or []
            return items[0] if items else None

        return await asyncio.to_thread(_execute)

    async def insert_reply(
        self, credentials: Credentials, parent_id: str, text: str
    ) -> Dict[str, Any]:
        def _execute() -> Dict[str, Any]:
            service = self._service_factory(credentials)
            body = {"snippet": {"parentId": parent_id, "textOriginal": text}}
            return service.comments().insert(part="snippet", body=body).execute()

        return await asyncio.to_thread(_execute)

    async def delete_comment(self, credentials: Credentials, comment_id: str) -> None:
        def _execute() -> None:
            service = self._service_factory(credentials)
            service.comments().delete(id=comment_id).execute()

        await asyncio.to_thread(_execute)


def _build_service(credentials: Credentials):
    # No refresh-and-retry on 401; the caller classifies it.
    http = AuthorizedHttp(credentials, http=httplib2.Http(), refresh_status_codes=())
    return build("youtube", "v3", http=http, cache_discovery=False)


__all__ = ["YouTubeClient"]
