"""
Application error hierarchy

Every error carries the HTTP status the handlers answer with. @Logger.io
logs CustomBaseError subclasses as expected failures (no traceback).
"""

from typing import Optional


class CustomBaseError(Exception):
    status_code: int = 500

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class DomainError(CustomBaseError):
    """Invalid input or a rule violation (400)"""

    status_code = 400


class AuthenticationError(CustomBaseError):
    status_code = 401


class ForbiddenError(CustomBaseError):
    status_code = 403


class NotFoundError(CustomBaseError):
    status_code = 404


class ConflictError(CustomBaseError):
    """Request collides with stored state: duplicate ticket, sold out, terminal status (409)"""

    status_code = 409


class UpstreamError(CustomBaseError):
    """An external service (payment gateway) failed or rejected the call (502)"""

    status_code = 502
