# backend/app/domain/errors.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str

    def as_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


class SpmError(Exception):
    """Base for every error the API boundary knows how to render."""

    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)
        if message:
            self.message = message

    def body(self) -> dict[str, Any]:
        return {"message": self.message}


class ValidationError(SpmError):
    status_code = 400
    message = "Invalid data"

    def __init__(self, errors: Iterable[FieldError], message: str | None = None) -> None:
        super().__init__(message)
        self.errors = list(errors)

    @classmethod
    def single(cls, field: str, message: str) -> "ValidationError":
        return cls([FieldError(field=field, message=message)])

    def body(self) -> dict[str, Any]:
        return {"message": self.message, "errors": [e.as_dict() for e in self.errors]}


class NotFoundError(SpmError):
    status_code = 404

    def __init__(self, entity_type: str, entity_id: str) -> None:
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type.replace('_', ' ').capitalize()} not found")


class AuthorizationError(SpmError):
    status_code = 403
    message = "Forbidden"


class AuthenticationError(SpmError):
    status_code = 401
    message = "Not authenticated"


class ConflictError(SpmError):
    status_code = 409
    message = "Conflict"


class StorageError(SpmError):
    """Raw driver errors are wrapped here; their text never reaches the caller."""

    status_code = 500
    message = "Internal server error"

    def __init__(self, operation: str, cause: BaseException | None = None) -> None:
        super().__init__()
        self.operation = operation
        self.cause = cause
