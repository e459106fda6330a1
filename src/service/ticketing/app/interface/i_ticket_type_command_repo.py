from abc import ABC, abstractmethod
from typing import List, Optional

from src.service.ticketing.domain.entity.ticket_type_entity import TicketType


class ITicketTypeCommandRepo(ABC):
    @abstractmethod
    async def get_by_id(self, *, ticket_type_id: int) -> Optional[TicketType]:
        pass

    @abstractmethod
    async def list_by_event(self, *, event_id: int, active_only: bool = False) -> List[TicketType]:
        pass

    @abstractmethod
    async def create(self, *, ticket_type: TicketType) -> TicketType:
        pass

    @abstractmethod
    async def reserve_unit(
        self, *, ticket_type_id: int, event_id: Optional[int] = None
    ) -> Optional[TicketType]:
        """
        Atomically take one unit if the type is active and not sold out.

        When ``event_id`` is given, a type belonging to another event is never touched.

        Returns:
            The updated ticket type, or None when nothing was reserved
        """
        pass

    @abstractmethod
    async def release_unit(self, *, ticket_type_id: int) -> Optional[TicketType]:
        pass
