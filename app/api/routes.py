"""
FastAPI routes for the YouTube proxy, notes and activity log.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, Any, List, Optional

from fastapi import APIRouter, Depends, Query

from app.dependencies import (
    get_activity_log,
    get_note_service,
    get_token_manager,
    get_youtube_action_service,
)
from app.schemas import (
    CommentRequest,
    HealthResponse,
    LogEntry,
    MessageResponse,
    Note,
    NoteCreateRequest,
    ReplyRequest,
    VideoUpdateRequest,
)
from app.services import ActivityLog, NoteService, TokenManager, YouTubeActionService

router = APIRouter()

YouTubeActions = Annotated[YouTubeActionService, Depends(get_youtube_action_service)]


@router.get("/video/{video_id}")
async def get_video(video_id: str, service: YouTubeActions) -> dict[str, Any]:
    """Return the video's snippet and statistics."""
    return await service.fetch_video(video_id)


@router.put("/video/{video_id}")
async def update_video(
    video_id: str, payload: VideoUpdateRequest, service: YouTubeActions
) -> dict[str, Any]:
    """Update the title and/or description of a video."""
    return await service.update_video(
        video_id, title=payload.title, description=payload.description
    )


@router.post("/video/{video_id}/comment")
async def add_comment(
    video_id: str, payload: CommentRequest, service: YouTubeActions
) -> dict[str, Any]:
    return await service.add_comment(video_id, payload.text)


@router.post("/comment/{comment_id}/reply")
async def reply_to_comment(
    comment_id: str, payload: ReplyRequest, service: YouTubeActions
) -> dict[str, Any]:
    return await service.reply_to_comment(comment_id, payload.text)


@router.delete("/comment/{comment_id}", response_model=MessageResponse)
async def delete_comment(comment_id: str, service: YouTubeActions) -> dict[str, str]:
    return await service.delete_comment(comment_id)


@router.post("/notes", response_model=Note)
async def create_note(
    payload: NoteCreateRequest,
    service: Annotated[NoteService, Depends(get_note_service)],
) -> Note:
    return await service.create_note(payload)


@router.get("/notes", response_model=List[Note])
async def list_notes(
    service: Annotated[NoteService, Depends(get_note_service)],
    q: Optional[str] = Query(
        default=None, description="Case-insensitive substring to match in note text."
    ),
) -> List[Note]:
    return await service.search_notes(q)


@router.get("/logs", response_model=List[LogEntry])
async def list_logs(
    activity_log: Annotated[ActivityLog, Depends(get_activity_log)],
) -> List[LogEntry]:
    """Activity log, newest entry first."""
    return await activity_log.list_entries()


@router.get("/health", response_model=HealthResponse)
async def healthcheck(
    token_manager: Annotated[TokenManager, Depends(get_token_manager)],
) -> HealthResponse:
    """Simple health endpoint for monitoring."""
    return HealthResponse(
        status="OK",
        timestamp=datetime.now(timezone.utc),
        has_refresh_token=token_manager.has_refresh_token,
    )


__all__ = ["router"]
