"""
Orchestration of the proxied YouTube operations.

Each operation checks the access token, confirms the target resource exists
where it needs one, calls YouTube once, and records the outcome in the
activity log. Failures surface as :class:`ApiError`.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, TypeVar

import httplib2
from google.oauth2.credentials import Credentials
from googleapiclient.errors import HttpError

from app.clients.youtube import YouTubeClient
from app.core.errors import ApiError, ErrorCode
from app.services.activity_log import ActivityLog
from app.services.token_manager import TokenManager
from app.services.upstream_errors import classify_upstream_error

logger = logging.getLogger(__name__)

T = TypeVar("T")

_WRITABLE_SNIPPET_FIELDS = ("title", "description", "tags", "categoryId", "defaultLanguage")

_REPLY_MESSAGES = {
    HTTPStatus.NOT_FOUND: "Comment not found or you don't have permission to reply.",
}
_DELETE_MESSAGES = {
    HTTPStatus.FORBIDDEN: "Permission denied. You can only delete your own comments.",
    HTTPStatus.NOT_FOUND: "Comment not found.",
}


class YouTubeActionService:
    """Proxy video and comment operations for the connected channel."""

    def __init__(
        self,
        *,
        youtube_client: YouTubeClient,
        token_manager: TokenManager,
        activity_log: ActivityLog,
    ) -> None:
        self._youtube = youtube_client
        self._tokens = token_manager
        self._activity_log = activity_log

    async def fetch_video(self, video_id: str) -> Dict[str, Any]:
        async def _operation(credentials: Credentials) -> Dict[str, Any]:
            return await self._require_video(credentials, video_id, part="snippet,statistics")

        return await self._perform(
            "FETCH_VIDEO",
            {"videoId": video_id},
            _operation,
            default_message="Failed to fetch video",
        )

    async def update_video(
        self,
        video_id: str,
        *,
        title: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Replace title and/or description, keeping the rest of the snippet."""

        async def _operation(credentials: Credentials) -> Dict[str, Any]:
            current = await self._require_video(credentials, video_id, part="snippet")
            current_snippet = current.get("snippet") or {}
            snippet = {
                field: current_snippet[field]
                for field in _WRITABLE_SNIPPET_FIELDS
                if field in current_snippet
            }
            snippet["title"] = title or current_snippet.get("title")
            snippet["description"] = description or current_snippet.get("description", "")
            return await self._youtube.update_video_snippet(credentials, video_id, snippet)

        return await self._perform(
            "UPDATE_VIDEO",
            {"videoId": video_id, "title": title, "description": description},
            _operation,
            default_message="Failed to update video",
        )

    async def add_comment(self, video_id: str, text: str) -> Dict[str, Any]:
        async def _operation(credentials: Credentials) -> Dict[str, Any]:
            await self._require_video(credentials, video_id, part="id")
            return await self._youtube.insert_comment_thread(credentials, video_id, text)

        return await self._perform(
            "ADD_COMMENT",
            {"videoId": video_id, "text": text},
            _operation,
            default_message="Failed to add comment",
        )

    async def reply_to_comment(self, comment_id: str, text: str) -> Dict[str, Any]:
        async def _operation(credentials: Credentials) -> Dict[str, Any]:
            await self._require_comment(credentials, comment_id)
            return await self._youtube.insert_reply(credentials, comment_id, text)

        return await self._perform(
            "REPLY_COMMENT",
            {"commentId": comment_id, "text": text},
            _operation,
            messages=_REPLY_MESSAGES,
            default_message="Failed to reply to comment",
        )

    async def delete_comment(self, comment_id: str) -> Dict[str, str]:
        async def _operation(credentials: Credentials) -> Dict[str, str]:
            await self._require_comment(credentials, comment_id)
            await self._youtube.delete_comment(credentials, comment_id)
            return {"message": "Comment deleted successfully"}

        return await self._perform(
            "DELETE_COMMENT",
            {"commentId": comment_id},
            _operation,
            messages=_DELETE_MESSAGES,
            default_message="Failed to delete comment",
        )

    async def _require_video(
        self, credentials: Credentials, video_id: str, *, part: str
    ) -> Dict[str, Any]:
        video = await self._youtube.get_video(credentials, video_id, part=part)
        if video is None:
            raise ApiError.not_found("No video found with the provided ID")
        return video

    async def _require_comment(self, credentials: Credentials, comment_id: str) -> None:
        if await self._youtube.get_comment(credentials, comment_id) is None:
            raise ApiError.not_found("No comment found with the provided ID")

    async def _perform(
        self,
        action: str,
        details: Dict[str, Any],
        operation: Callable[[Credentials], Awaitable[T]],
        *,
        messages: Optional[Mapping[int, str]] = None,
        default_message: str,
    ) -> T:
        if not await self._tokens.ensure_valid_token():
            error = ApiError.auth_required()
            await self._record_failure(action, details, error)
            raise error

        try:
            result = await operation(self._tokens.credentials())
        except ApiError as error:
            await self._record_failure(action, details, error)
            raise
        except HttpError as exc:
            error = classify_upstream_error(
                exc, messages=messages, default_message=default_message
            )
            logger.error("%s failed upstream: %s", action, exc)
            await self._record_failure(action, details, error)
            raise error from exc
        except (OSError, httplib2.HttpLib2Error) as exc:
            logger.error("%s could not reach YouTube: %s", action, exc)
            error = ApiError(
                HTTPStatus.INTERNAL_SERVER_ERROR,
                ErrorCode.UPSTREAM_ERROR,
                default_message,
                details=str(exc),
            )
            await self._record_failure(action, details, error)
            raise error from exc
        except Exception as exc:  # pylint: disable=broad-except
            logger.exception("%s failed unexpectedly", action)
            error = ApiError.internal(default_message, details=str(exc))
            await self._record_failure(action, details, error)
            raise error from exc

        await self._activity_log.try_record(action, details)
        return result

    async def _record_failure(
        self, action: str, details: Dict[str, Any], error: ApiError
    ) -> None:
        await self._activity_log.try_record(
            f"{action}_ERROR",
            {**details, "error": error.details or error.message, "code": error.code.value},
        )


__all__ = ["YouTubeActionService"]
