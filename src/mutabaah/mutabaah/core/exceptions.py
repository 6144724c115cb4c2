from __future__ import annotations

from typing import Any, Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when the referenced entity does not exist."""


class ConflictError(DomainError):
    """Raised on duplicate creation or double resolution."""


class LockedError(DomainError):
    """Raised when an edit targets a date or month that is no longer editable."""


class PartialFailure(DomainError):
    """One half of a two-step write succeeded and the other did not.

    `entity` is what was persisted; `cause` is the error from the failed half.
    """

    def __init__(self, message: str, *, entity: Any = None, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.entity = entity
        self.cause = cause
