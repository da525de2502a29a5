"""Error taxonomy shared by services and the API layer.

Services raise these; the API renders them as ``{"error": message}`` with
the matching HTTP status.
"""

from __future__ import annotations


class EmsError(Exception):
    """Base class for all expected service failures."""

    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(EmsError):
    """Malformed, missing or out-of-range input."""

    status_code = 400


class AuthenticationError(EmsError):
    """Missing, invalid or expired credentials."""

    status_code = 401


class AuthorizationError(EmsError):
    """Valid identity without the required role or ownership."""

    status_code = 403


class NotFoundError(EmsError):
    """Referenced entity does not exist."""

    status_code = 404


class ConflictError(EmsError):
    """Uniqueness violation."""

    status_code = 409


class InternalError(EmsError):
    """Unexpected store or filesystem failure."""

    status_code = 500
