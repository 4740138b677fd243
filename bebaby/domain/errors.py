"""Error taxonomy shared by services and the HTTP layer."""

from __future__ import annotations

from typing import Optional


class AppError(Exception):
    """Base class for failures that map onto a client-visible status code."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    status_code = 400


class AuthError(AppError):
    status_code = 401


class CsrfError(AppError):
    status_code = 403


class ForbiddenError(AppError):
    status_code = 403


class NotFoundError(AppError):
    status_code = 404


class ConflictError(AppError):
    status_code = 409


class RateLimitError(AppError):
    status_code = 429

    def __init__(self, message: str, *, limit: int, reset: int, retry_after: Optional[int] = None) -> None:
        super().__init__(message)
        self.limit = limit
        self.reset = reset
        self.retry_after = retry_after


class StorageError(AppError):
    """Unexpected backend failure; the message is never shown to clients."""

    status_code = 500
