"""
Translate YouTube Data API failures into the local error taxonomy.

Classification is driven by the HTTP status and the ``reason`` codes in the
structured error payload. When the payload carries no reason codes, the error
message is scanned for the same reason names instead.
"""

from __future__ import annotations

import json
from http import HTTPStatus
from typing import Mapping, Optional

from googleapiclient.errors import HttpError

from app.core.errors import ApiError, ErrorCode

# (status, code, message) for reasons that override the status-level mapping.
_REASON_RULES: dict[str, tuple[int, ErrorCode, str]] = {
    "commentsDisabled": (
        HTTPStatus.BAD_REQUEST,
        ErrorCode.INVALID_INPUT,
        "Comments are disabled for this video",
    ),
    "videoNotFound": (HTTPStatus.NOT_FOUND, ErrorCode.NOT_FOUND, "Video not found"),
    "commentNotFound": (HTTPStatus.NOT_FOUND, ErrorCode.NOT_FOUND, "Comment not found."),
    "parentCommentNotFound": (
        HTTPStatus.NOT_FOUND,
        ErrorCode.NOT_FOUND,
        "Comment not found.",
    ),
    "forbidden": (
        HTTPStatus.FORBIDDEN,
        ErrorCode.FORBIDDEN,
        "You don't have permission to perform this action",
    ),
    "quotaExceeded": (
        HTTPStatus.FORBIDDEN,
        ErrorCode.FORBIDDEN,
        "YouTube API quota exceeded. Try again later.",
    ),
}

_STATUS_RULES: dict[int, tuple[int, ErrorCode, Optional[str]]] = {
    # A None message means "use the upstream message".
    HTTPStatus.BAD_REQUEST: (HTTPStatus.BAD_REQUEST, ErrorCode.INVALID_INPUT, None),
    HTTPStatus.UNAUTHORIZED: (
        HTTPStatus.UNAUTHORIZED,
        ErrorCode.AUTH_REQUIRED,
        "Authentication required. Please login again.",
    ),
    HTTPStatus.FORBIDDEN: (
        HTTPStatus.FORBIDDEN,
        ErrorCode.FORBIDDEN,
        "Permission denied. Check your YouTube API quota or permissions.",
    ),
    HTTPStatus.NOT_FOUND: (
        HTTPStatus.NOT_FOUND,
        ErrorCode.NOT_FOUND,
        "Resource not found.",
    ),
}

_REASON_STATUSES = frozenset(
    {HTTPStatus.BAD_REQUEST, HTTPStatus.FORBIDDEN, HTTPStatus.NOT_FOUND}
)


def _parse_error_payload(exc: HttpError) -> tuple[list[str], str]:
    """Return (reason codes, message) from the upstream error body."""
    reasons: list[str] = []
    message = ""
    content = exc.content or b""
    if isinstance(content, bytes):
        content = content.decode("utf-8", errors="replace")
    try:
        payload = json.loads(content) if content else {}
    except ValueError:
        payload = {}

    error = payload.get("error") if isinstance(payload, dict) else None
    if isinstance(error, dict):
        message = str(error.get("message") or "")
        for item in error.get("errors") or []:
            if isinstance(item, dict) and item.get("reason"):
                reasons.append(str(item["reason"]))
    if not message:
        message = str(getattr(exc, "reason", "") or exc)
    return reasons, message


def _reasons_from_message(message: str) -> list[str]:
    return [reason for reason in _REASON_RULES if reason in message]


def upstream_status(exc: HttpError) -> int:
    return int(getattr(exc.resp, "status", 0) or 0)


def classify_upstream_error(
    exc: HttpError,
    *,
    messages: Optional[Mapping[int, str]] = None,
    default_message: str = "Request to YouTube failed",
) -> ApiError:
    """Map a YouTube ``HttpError`` to an :class:`ApiError`.

    ``messages`` overrides the client-facing message per resulting status code,
    whether the status came from a reason code or from the HTTP status.
    """
    status = upstream_status(exc)
    reasons, upstream_message = _parse_error_payload(exc)
    if not reasons and status == HTTPStatus.BAD_REQUEST:
        reasons = _reasons_from_message(upstream_message)

    rule = _STATUS_RULES.get(status)
    if status in _REASON_STATUSES:
        matched = next((reason for reason in reasons if reason in _REASON_RULES), None)
        if matched is not None:
            rule = _REASON_RULES[matched]
    if rule is None:
        rule = (HTTPStatus.INTERNAL_SERVER_ERROR, ErrorCode.UPSTREAM_ERROR, default_message)

    mapped_status, code, message = rule
    if messages and mapped_status in messages:
        message = messages[mapped_status]
    return ApiError(mapped_status, code, message or upstream_message, details=upstream_message)


__all__ = ["classify_upstream_error", "upstream_status"]
