"""
Note and activity log models.

Stored documents use camelCase keys; the models accept either spelling and
serialize with the camelCase aliases.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class NoteCreateRequest(_CamelModel):
    """Payload for creating a note. Unknown fields are ignored."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )

    video_id: Optional[str] = Field(None, description="Video the note refers to.")
    text: str = Field(..., min_length=1, description="Free-form note text.")
    tags: List[str] = Field(default_factory=list)


class Note(_CamelModel):
    id: str
    video_id: Optional[str] = None
    text: str
    tags: List[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class LogEntry(_CamelModel):
    """One append-only activity log record."""

    id: str
    action: str = Field(..., description="Action tag such as FETCH_VIDEO or ADD_COMMENT_ERROR.")
    details: Dict[str, Any] = Field(default_factory=dict)
    created_at: datetime


class HealthResponse(_CamelModel):
    status: str
    timestamp: datetime
    has_refresh_token: bool


__all__ = ["HealthResponse", "LogEntry", "Note", "NoteCreateRequest"]
