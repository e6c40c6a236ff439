"""Public schema exports."""

from .notes import HealthResponse, LogEntry, Note, NoteCreateRequest
from .youtube import (
    MAX_COMMENT_LENGTH,
    CommentRequest,
    MessageResponse,
    ReplyRequest,
    VideoUpdateRequest,
    validate_comment_text,
)

__all__ = [
    "CommentRequest",
    "HealthResponse",
    "LogEntry",
    "MAX_COMMENT_LENGTH",
    "MessageResponse",
    "Note",
    "NoteCreateRequest",
    "ReplyRequest",
    "VideoUpdateRequest",
    "validate_comment_text",
]
