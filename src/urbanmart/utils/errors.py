"""Exceptions the marketplace raises on top of Protean's own.

``ValidationError``, ``ObjectNotFoundError`` and ``InvalidOperationError``
from ``protean.exceptions`` cover most failures. The kinds below exist so the
HTTP layer can tell an illegal state move (409) and an authentication or
authorization failure (401/403) apart from plain bad input.
"""

from protean.exceptions import ValidationError


class InvalidTransitionError(ValidationError):
    """A status change not permitted by the owning state machine."""


class AuthenticationError(Exception):
    def __init__(self, message: str = "Invalid token"):
        super().__init__(message)
        self.message = message


class PermissionDeniedError(Exception):
    def __init__(self, message: str = "Insufficient permissions"):
        super().__init__(message)
        self.message = message
