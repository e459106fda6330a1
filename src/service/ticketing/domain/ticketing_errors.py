"""
Ticketing domain errors

Each error carries the HTTP-equivalent status category the purchase flow
surfaces to the caller: not-found (404), forbidden (403), conflict (409),
bad request (400) and upstream failure (502).
"""

from typing import Optional

from src.platform.exception.exceptions import (
    ConflictError,
    DomainError,
    ForbiddenError,
    NotFoundError,
    UpstreamError,
)


class EventNotFoundError(NotFoundError):
    def __init__(self, event_id: int) -> None:
        super().__init__('Event not found')
        self.event_id = event_id


class TicketTypeNotFoundError(NotFoundError):
    def __init__(self, ticket_type_id: int) -> None:
        super().__init__('Ticket type not found')
        self.ticket_type_id = ticket_type_id


class TicketNotFoundError(NotFoundError):
    def __init__(self, ticket_id: int) -> None:
        super().__init__('Ticket not found')
        self.ticket_id = ticket_id


class UserNotFoundError(NotFoundError):
    def __init__(self, user_id: int) -> None:
        super().__init__('User not found')
        self.user_id = user_id


class TicketTypeSoldOutError(ConflictError):
    def __init__(self, ticket_type_id: int) -> None:
        super().__init__('This ticket type is sold out')
        self.ticket_type_id = ticket_type_id


class DuplicateTicketError(ConflictError):
    def __init__(self, user_id: int, event_id: int) -> None:
        super().__init__(
            'You cannot buy two tickets for yourself. You already have a ticket for this event.'
        )
        self.user_id = user_id
        self.event_id = event_id


class ReferenceCollisionError(ConflictError):
    def __init__(self, reference: str) -> None:
        super().__init__('Payment reference already exists')
        self.reference = reference


class InvalidTransitionError(ConflictError):
    def __init__(self, current: str, requested: str) -> None:
        super().__init__(f'Cannot change ticket payment status from {current} to {requested}')
        self.current = current
        self.requested = requested


class RestrictionViolationError(ForbiddenError):
    pass


class ReferenceParseError(DomainError):
    def __init__(self, reference: str) -> None:
        super().__init__('Could not determine event ID from payment reference', 400)
        self.reference = reference


class NotFreeEventError(DomainError):
    def __init__(self, event_id: int) -> None:
        super().__init__('This is not a free event', 400)
        self.event_id = event_id


class SandboxDisabledError(ForbiddenError):
    def __init__(self) -> None:
        super().__init__('Test ticket creation is disabled')


class GatewayError(UpstreamError):
    def __init__(self, message: str, *, reference: Optional[str] = None) -> None:
        super().__init__(message)
        self.reference = reference


class PlatformAccountNotFoundError(NotFoundError):
    def __init__(self) -> None:
        super().__init__('No admin account found to credit platform fee')


class FeeCreditFailure(ConflictError):
    """Fee could not be applied to the platform balance. Logged, never fatal to a purchase."""

    def __init__(self, ticket_id: int, reason: str) -> None:
        super().__init__(f'Platform fee credit failed for ticket {ticket_id}: {reason}')
        self.ticket_id = ticket_id
        self.reason = reason
