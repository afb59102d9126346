"""Domain error kinds surfaced to API callers.

Services raise these; ``pokerlog.middleware.error_handler`` renders them as
``{"detail", "kind", "field", ...}`` JSON with the matching status code.
"""

from __future__ import annotations

from typing import Any


class PokerlogError(Exception):
    """Base class for errors that carry an HTTP status and a stable ``kind``."""

    status_code: int = 400
    kind: str = "error"

    def __init__(self, message: str, *, field: str | None = None, **extra: Any) -> None:
        super().__init__(message)
        self.message = message
        self.field = field
        self.extra = extra

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"detail": self.message, "kind": self.kind, "field": self.field}
        body.update(self.extra)
        return body


class NotAuthenticatedError(PokerlogError):
    """No valid caller identity."""

    status_code = 401
    kind = "not_authenticated"


class NotFoundError(PokerlogError):
    """Unknown id, or an id owned by someone else."""

    status_code = 404
    kind = "not_found"


class ConflictError(PokerlogError):
    """Duplicate record. ``existing_id`` points at the record already stored."""

    status_code = 409
    kind = "conflict"

    def __init__(self, message: str, *, existing_id: str | None = None, **extra: Any) -> None:
        super().__init__(message, existing_id=existing_id, **extra)
        self.existing_id = existing_id


class InputValidationError(PokerlogError):
    """Negative amounts, missing fields, malformed period bounds."""

    status_code = 422
    kind = "validation_error"
