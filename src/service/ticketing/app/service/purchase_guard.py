"""
Purchase guard - pre-write checks and the reserve+insert step shared by
every flow that creates a ticket.
"""

from decimal import Decimal
from typing import Optional

from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.domain.entity.event_entity import Event
from src.service.ticketing.domain.entity.ticket_entity import Ticket
from src.service.ticketing.domain.entity.ticket_type_entity import TicketType
from src.service.ticketing.domain.entity.user_entity import UserEntity
from src.service.ticketing.domain.restriction_evaluator import check_restrictions
from src.service.ticketing.domain.ticketing_errors import (
    DuplicateTicketError,
    EventNotFoundError,
    TicketTypeNotFoundError,
    TicketTypeSoldOutError,
    UserNotFoundError,
)


class PurchaseContext:
    """Validated inputs of a purchase attempt"""

    def __init__(
        self, *, user: UserEntity, event: Event, ticket_type: Optional[TicketType]
    ) -> None:
        self.user = user
        self.event = event
        self.ticket_type = ticket_type

    @property
    def amount(self) -> Decimal:
        if self.ticket_type is not None:
            return self.ticket_type.price
        return self.event.price or Decimal('0')


@Logger.io
async def validate_purchase(
    *,
    uow: AbstractUnitOfWork,
    user_id: int,
    event_id: int,
    ticket_type_id: Optional[int],
) -> PurchaseContext:
    """
    Run every pre-write check of a purchase, in order: buyer, event, ticket type,
    restrictions, existing active ticket.

    Raises:
        UserNotFoundError, EventNotFoundError, TicketTypeNotFoundError,
        TicketTypeSoldOutError, RestrictionViolationError, DuplicateTicketError
    """
    user = await uow.users.get_by_id(user_id=user_id)
    if user is None:
        raise UserNotFoundError(user_id)

    event = await uow.events.get_by_id(event_id=event_id)
    if event is None:
        raise EventNotFoundError(event_id)

    ticket_type = None
    if ticket_type_id is not None:
        ticket_type = await uow.ticket_types.get_by_id(ticket_type_id=ticket_type_id)
        if ticket_type is None or ticket_type.event_id != event_id:
            raise TicketTypeNotFoundError(ticket_type_id)
        if not ticket_type.is_active or not ticket_type.is_available():
            raise TicketTypeSoldOutError(ticket_type_id)

    check_restrictions(event, user)

    if await uow.tickets.has_active_ticket(user_id=user_id, event_id=event_id):
        raise DuplicateTicketError(user_id, event_id)

    return PurchaseContext(user=user, event=event, ticket_type=ticket_type)


async def reserve_and_create(*, uow: AbstractUnitOfWork, ticket: Ticket) -> Ticket:
    """
    Take one ticket-type unit (when the ticket has a type) and insert the ticket
    in the caller's transaction, so both land or neither does.

    Raises:
        TicketTypeSoldOutError: The conditional increment matched no row
        DuplicateTicketError, ReferenceCollisionError: From the ticket insert
    """
    if ticket.ticket_type_id is not None:
        reserved = await uow.ticket_types.reserve_unit(
            ticket_type_id=ticket.ticket_type_id, event_id=ticket.event_id
        )
        if reserved is None:
            raise TicketTypeSoldOutError(ticket.ticket_type_id)
    return await uow.tickets.create(ticket=ticket)

