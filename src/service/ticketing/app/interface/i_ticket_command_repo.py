from abc import ABC, abstractmethod
from typing import List, Optional

import attrs

from src.service.ticketing.domain.entity.ticket_entity import Ticket
from src.service.ticketing.domain.enum.payment_status import PaymentStatus


@attrs.define(frozen=True)
class StatusChange:
    """Outcome of a status write: the stored ticket and whether this call moved it."""

    ticket: Ticket
    transitioned: bool


class ITicketCommandRepo(ABC):
    """
    Ticket store port.

    Implementations enforce, at the storage layer, at most one ticket in
    pending/completed per (user, event) and a globally unique payment reference.
    """

    @abstractmethod
    async def has_active_ticket(self, *, user_id: int, event_id: int) -> bool:
        pass

    @abstractmethod
    async def create(self, *, ticket: Ticket) -> Ticket:
        """
        Insert a ticket in a single conditional write.

        Raises:
            DuplicateTicketError: The user already holds a pending/completed ticket for the event
            ReferenceCollisionError: The payment reference is already stored
        """
        pass

    @abstractmethod
    async def get_by_reference(self, *, reference: str) -> Optional[Ticket]:
        pass

    @abstractmethod
    async def get_by_id(self, *, ticket_id: int) -> Optional[Ticket]:
        pass

    @abstractmethod
    async def update_status(self, *, ticket_id: int, new_status: PaymentStatus) -> StatusChange:
        """
        Move a pending ticket to a terminal status.

        Re-applying the current status returns ``transitioned=False``.

        Raises:
            TicketNotFoundError: No ticket with this id
            InvalidTransitionError: The ticket is already in a different terminal status
        """
        pass

    @abstractmethod
    async def list_by_user(self, *, user_id: int) -> List[Ticket]:
        pass
