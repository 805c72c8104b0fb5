"""
todo_api.errors

Domain error taxonomy shared by the auth core, services and repositories.

Responsibilities:
- Name every failure category a service operation can end in.
- Stay free of HTTP types; `api.errors` maps these onto status codes.
"""

from __future__ import annotations


class TodoApiError(Exception):
    """Base class for all expected failures."""

    default_message = "error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationFailure(TodoApiError):
    default_message = "validation failed"


class NoFieldsToUpdate(ValidationFailure):
    default_message = "no fields to update"


class Unauthorized(TodoApiError):
    default_message = "unauthorized"


class InvalidCredentials(Unauthorized):
    default_message = "invalid credentials"


class Forbidden(TodoApiError):
    default_message = "permission denied"


class NotFound(TodoApiError):
    default_message = "not found"


class Conflict(TodoApiError):
    default_message = "conflict"


class InternalFailure(TodoApiError):
    default_message = "internal error"


class HashingFailure(InternalFailure):
    default_message = "hashing failure"


class SigningFailure(InternalFailure):
    default_message = "token signing failure"


class StorageFailure(InternalFailure):
    default_message = "storage failure"


# --- Module Notes -----------------------------------------------------------
# Internal failures carry detail for logs only; the boundary never echoes their message.
