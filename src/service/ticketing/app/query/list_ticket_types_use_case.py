from typing import List, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.domain.entity.ticket_type_entity import TicketType
from src.service.ticketing.domain.ticketing_errors import EventNotFoundError


class ListTicketTypesUseCase:
    """Event owner and admins see every ticket type; everyone else sees active ones only."""

    def __init__(self, *, uow_factory: UnitOfWorkFactory) -> None:
        self.uow_factory = uow_factory

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work.provider]),
    ) -> Self:
        return cls(uow_factory=uow_factory)

    @Logger.io
    async def list_ticket_types(
        self, *, event_id: int, user_id: Optional[int] = None
    ) -> List[TicketType]:
        async with self.uow_factory() as uow:
            event = await uow.events.get_by_id(event_id=event_id)
            if event is None:
                raise EventNotFoundError(event_id)

            is_admin = False
            if user_id is not None:
                user = await uow.users.get_by_id(user_id=user_id)
                is_admin = bool(user and user.is_admin)

            active_only = not event.is_managed_by(user_id=user_id, is_admin=is_admin)
            return await uow.ticket_types.list_by_event(event_id=event_id, active_only=active_only)
