"""
Error taxonomy shared by the API layer and services.

Every failure that reaches a client is rendered as ``{error, message, details}``.
"""

from __future__ import annotations

import logging
from enum import Enum
from http import HTTPStatus
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ErrorCode(str, Enum):
    INVALID_INPUT = "INVALID_INPUT"
    AUTH_REQUIRED = "AUTH_REQUIRED"
    NOT_FOUND = "NOT_FOUND"
    FORBIDDEN = "FORBIDDEN"
    UPSTREAM_ERROR = "UPSTREAM_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ApiError(Exception):
    """A failure with a known HTTP status and error code."""

    def __init__(
        self,
        status_code: int,
        code: ErrorCode,
        message: str,
        details: Any = None,
    ) -> None:
        super().__init__(message)
        self.status_code = int(status_code)
        self.code = code
        self.message = message
        self.details = details

    def to_body(self) -> dict[str, Any]:
        return {
            "error": self.code.value,
            "message": self.message,
            "details": self.details,
        }

    @classmethod
    def invalid_input(cls, message: str, details: Any = None) -> "ApiError":
        return cls(HTTPStatus.BAD_REQUEST, ErrorCode.INVALID_INPUT, message, details)

    @classmethod
    def auth_required(cls, message: str = "Please login again") -> "ApiError":
        return cls(HTTPStatus.UNAUTHORIZED, ErrorCode.AUTH_REQUIRED, message)

    @classmethod
    def not_found(cls, message: str, details: Any = None) -> "ApiError":
        return cls(HTTPStatus.NOT_FOUND, ErrorCode.NOT_FOUND, message, details)

    @classmethod
    def internal(cls, message: str, details: Any = None) -> "ApiError":
        return cls(
            HTTPStatus.INTERNAL_SERVER_ERROR, ErrorCode.INTERNAL_ERROR, message, details
        )


async def _handle_api_error(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def _handle_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        message = str(error.get("msg", "")).removeprefix("Value error, ")
        problems.append({"field": location, "message": message})
    message = problems[0]["message"] if problems else "Invalid request"
    logger.info("Rejected invalid request to %s: %s", request.url.path, message)
    error = ApiError.invalid_input(message, details=problems)
    return JSONResponse(status_code=error.status_code, content=error.to_body())


async def _handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "Unhandled error on %s %s", request.method, request.url.path, exc_info=exc
    )
    error = ApiError.internal("Internal server error")
    return JSONResponse(status_code=error.status_code, content=error.to_body())


def register_error_handlers(app: FastAPI) -> None:
    """Install the JSON error renderers on the application."""
    app.add_exception_handler(ApiError, _handle_api_error)
    app.add_exception_handler(RequestValidationError, _handle_validation_error)
    app.add_exception_handler(Exception, _handle_unexpected_error)


__all__ = ["ApiError", "ErrorCode", "register_error_handlers"]
