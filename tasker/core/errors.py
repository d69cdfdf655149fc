"""Error kinds raised by services and repositories.

Each kind carries the HTTP status it maps to; the handlers in
``tasker.main`` turn them into ``{"error": message}`` bodies.
"""
from __future__ import annotations

from fastapi import status


class AppError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "internal server error"

    def __init__(self, message: str | None = None, *, headers: dict[str, str] | None = None):
        self.message = message or self.default_message
        self.headers = headers
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "invalid request"


class AuthError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "unauthorized"

    def __init__(self, message: str | None = None):
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "not found"


class ConflictError(AppError):
    # 중복 username은 원래 API 계약대로 400으로 내려간다
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "conflict"


class InternalError(AppError):
    pass
