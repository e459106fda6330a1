from decimal import Decimal
from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.service.purchase_guard import reserve_and_create, validate_purchase
from src.service.ticketing.app.service.ticket_completion_service import TicketCompletionService
from src.service.ticketing.domain.entity.ticket_entity import Ticket
from src.service.ticketing.domain.enum.payment_status import PaymentStatus
from src.service.ticketing.domain.ticketing_errors import NotFreeEventError
from src.service.ticketing.domain.value_object.payment_reference import PaymentReference


class RegisterFreeTicketUseCase:
    """
    Free event registration - no gateway involved

    The ticket is created directly as completed with amount 0. The fee ledger
    still records a (zero) credit so every completed ticket has exactly one entry.
    """

    def __init__(
        self,
        *,
        uow_factory: UnitOfWorkFactory,
        completion_service: TicketCompletionService,
    ) -> None:
        self.uow_factory = uow_factory
        self.completion_service = completion_service
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work.provider]),
        completion_service: TicketCompletionService = Depends(
            Provide[Container.ticket_completion_service]
        ),
    ) -> Self:
        return cls(uow_factory=uow_factory, completion_service=completion_service)

    @Logger.io
    async def register_free_ticket(
        self, *, user_id: int, event_id: int, ticket_type_id: Optional[int] = None
    ) -> Ticket:
        with self.tracer.start_as_current_span(
            'use_case.register_free_ticket',
            attributes={'event.id': event_id, 'user.id': user_id},
        ):
            async with self.uow_factory() as uow:
                context = await validate_purchase(
                    uow=uow, user_id=user_id, event_id=event_id, ticket_type_id=ticket_type_id
                )
                # A priced ticket type is never handed out at zero, even on a free event
                if not context.event.is_free_event or (
                    context.ticket_type is not None and context.ticket_type.price > 0
                ):
                    raise NotFreeEventError(event_id)

                reference = PaymentReference.build_free(event_id=event_id, user_id=user_id)
                ticket = Ticket.create(
                    user_id=user_id,
                    event_id=event_id,
                    ticket_type_id=ticket_type_id,
                    total_amount=Decimal('0'),
                    payment_reference=str(reference),
                    payment_status=PaymentStatus.COMPLETED,
                )
                ticket = await reserve_and_create(uow=uow, ticket=ticket)
                fee_credit = await self.completion_service.record_fee(uow=uow, ticket=ticket)
                await uow.commit()

            Logger.base.info(f'🆓 [FREE-TICKET] Ticket {ticket.id} registered for event {event_id}')
            await self.completion_service.announce(ticket=ticket, fee_credit=fee_credit)
            return ticket
