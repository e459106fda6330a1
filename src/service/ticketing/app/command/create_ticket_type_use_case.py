from decimal import Decimal
from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.exception.exceptions import ForbiddenError
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.domain.entity.ticket_type_entity import TicketType
from src.service.ticketing.domain.ticketing_errors import EventNotFoundError, UserNotFoundError


class CreateTicketTypeUseCase:
    def __init__(self, *, uow_factory: UnitOfWorkFactory) -> None:
        self.uow_factory = uow_factory
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work.provider]),
    ) -> Self:
        return cls(uow_factory=uow_factory)

    @Logger.io
    async def create_ticket_type(
        self,
        *,
        user_id: int,
        event_id: int,
        name: str,
        price: Decimal,
        quantity: int,
        description: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> TicketType:
        """
        Raises:
            EventNotFoundError: Unknown event
            ForbiddenError: Caller is neither the event owner nor an admin
        """
        with self.tracer.start_as_current_span(
            'use_case.create_ticket_type',
            attributes={'event.id': event_id, 'user.id': user_id},
        ):
            async with self.uow_factory() as uow:
                user = await uow.users.get_by_id(user_id=user_id)
                if user is None:
                    raise UserNotFoundError(user_id)
                event = await uow.events.get_by_id(event_id=event_id)
                if event is None:
                    raise EventNotFoundError(event_id)
                if not event.is_managed_by(user_id=user_id, is_admin=user.is_admin):
                    raise ForbiddenError('Only the event owner can manage ticket types')

                ticket_type = TicketType.create(
                    event_id=event_id,
                    name=name,
                    description=description,
                    price=price,
                    quantity=quantity,
                    is_active=is_active,
                )
                created = await uow.ticket_types.create(ticket_type=ticket_type)
                await uow.commit()

            Logger.base.info(
                f'🏷️ [TICKET-TYPE] Created "{created.name}" ({created.quantity} units) for event {event_id}'
            )
            return created
