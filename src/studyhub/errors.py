"""Domain error taxonomy.

Every failure the ledger, catalog, store or identity layer reports to a
caller is one of these. The HTTP layer maps them to status codes in
``studyhub.middleware.error_handler``.
"""

from __future__ import annotations


class StudyHubError(Exception):
    """Base class for all domain errors."""

    status_code = 400
    default_message = "Request failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthenticated(StudyHubError):
    """A mutating action was attempted with no signed-in user."""

    status_code = 401
    default_message = "Please sign in"

    def __init__(self, message: str | None = None, *, action: str | None = None) -> None:
        super().__init__(message)
        self.action = action


class NotFound(StudyHubError):
    """A point lookup (profile, job, quiz, document) missed."""

    status_code = 404
    default_message = "Not found"


class ValidationError(StudyHubError):
    """A required field is missing or malformed."""

    status_code = 422
    default_message = "Invalid input"


class Conflict(StudyHubError):
    """Duplicate id, failed compare-and-set, or illegal state transition."""

    status_code = 409
    default_message = "Conflict"


class StoreUnavailable(StudyHubError):
    """The backing store could not be reached or failed mid-operation."""

    status_code = 503
    default_message = "Storage backend unavailable"
