"""
Request and response models for the YouTube proxy endpoints.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

MAX_COMMENT_LENGTH = 10_000


def validate_comment_text(text: str, *, label: str = "Comment") -> str:
    """Return ``text`` stripped of surrounding whitespace.

    Raises ``ValueError`` when nothing but whitespace was supplied or the raw
    text exceeds :data:`MAX_COMMENT_LENGTH` characters.
    """
    if not text or not text.strip():
        raise ValueError(f"{label} text is required")
    if len(text) > MAX_COMMENT_LENGTH:
        raise ValueError(
            f"{label} text is too long (max {MAX_COMMENT_LENGTH} characters)"
        )
    return text.strip()


class VideoUpdateRequest(BaseModel):
    """New title and/or description for a video; omitted fields are kept."""

    title: Optional[str] = Field(None, description="Replacement video title.")
    description: Optional[str] = Field(None, description="Replacement video description.")

    @model_validator(mode="after")
    def _require_one_field(self) -> "VideoUpdateRequest":
        if not self.title and not self.description:
            raise ValueError("Title or description is required")
        return self


class CommentRequest(BaseModel):
    """Top-level comment to post on a video."""

    text: str = Field(..., description="Comment body, 1-10000 characters.")

    @field_validator("text")
    @classmethod
    def _check_text(cls, value: str) -> str:
        return validate_comment_text(value, label="Comment")


class ReplyRequest(BaseModel):
    """Reply to an existing comment."""

    text: str = Field(..., description="Reply body, 1-10000 characters.")

    @field_validator("text")
    @classmethod
    def _check_text(cls, value: str) -> str:
        return validate_comment_text(value, label="Reply")


class MessageResponse(BaseModel):
    message: str


__all__ = [
    "CommentRequest",
    "MAX_COMMENT_LENGTH",
    "MessageResponse",
    "ReplyRequest",
    "VideoUpdateRequest",
    "validate_comment_text",
]
