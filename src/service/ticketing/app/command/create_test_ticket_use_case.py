from decimal import Decimal
from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.core_setting import Settings
from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.service.purchase_guard import reserve_and_create
from src.service.ticketing.app.service.ticket_completion_service import TicketCompletionService
from src.service.ticketing.domain.entity.ticket_entity import Ticket
from src.service.ticketing.domain.enum.payment_status import PaymentStatus
from src.service.ticketing.domain.ticketing_errors import (
    EventNotFoundError,
    SandboxDisabledError,
    TicketTypeNotFoundError,
    UserNotFoundError,
)
from src.service.ticketing.domain.value_object.payment_reference import PaymentReference


class CreateTestTicketUseCase:
    """
    Sandbox helper: create a completed ticket without touching the gateway.

    Only available while PAYMENT_TEST_MODE_ENABLED is set and the gateway is
    not in live mode. The reference carries the ``-test`` marker so it can
    never be mistaken for a real payment.
    """

    def __init__(
        self,
        *,
        uow_factory: UnitOfWorkFactory,
        completion_service: TicketCompletionService,
        config: Settings,
    ) -> None:
        self.uow_factory = uow_factory
        self.completion_service = completion_service
        self.config = config
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work.provider]),
        completion_service: TicketCompletionService = Depends(
            Provide[Container.ticket_completion_service]
        ),
        config: Settings = Depends(Provide[Container.config_service]),
    ) -> Self:
        return cls(uow_factory=uow_factory, completion_service=completion_service, config=config)

    @Logger.io
    async def create_test_ticket(
        self,
        *,
        user_id: int,
        event_id: int,
        amount: Optional[Decimal] = None,
        ticket_type_id: Optional[int] = None,
    ) -> Ticket:
        if not self.config.PAYMENT_TEST_MODE_ENABLED or self.config.is_live_payment_mode:
            raise SandboxDisabledError()

        with self.tracer.start_as_current_span(
            'use_case.create_test_ticket',
            attributes={'event.id': event_id, 'user.id': user_id},
        ):
            async with self.uow_factory() as uow:
                if await uow.users.get_by_id(user_id=user_id) is None:
                    raise UserNotFoundError(user_id)
                if await uow.events.get_by_id(event_id=event_id) is None:
                    raise EventNotFoundError(event_id)
                if ticket_type_id is not None:
                    ticket_type = await uow.ticket_types.get_by_id(ticket_type_id=ticket_type_id)
                    if ticket_type is None or ticket_type.event_id != event_id:
                        raise TicketTypeNotFoundError(ticket_type_id)

                reference = PaymentReference.build_test(
                    event_id=event_id, user_id=user_id, ticket_type_id=ticket_type_id
                )
                ticket = Ticket.create(
                    user_id=user_id,
                    event_id=event_id,
                    ticket_type_id=ticket_type_id,
                    total_amount=(
                        amount if amount is not None else self.config.TEST_TICKET_DEFAULT_AMOUNT
                    ),
                    payment_reference=str(reference),
                    payment_status=PaymentStatus.COMPLETED,
                )
                ticket = await reserve_and_create(uow=uow, ticket=ticket)
                fee_credit = await self.completion_service.record_fee(uow=uow, ticket=ticket)
                await uow.commit()

            Logger.base.info(f'🧪 [TEST-TICKET] Created ticket {ticket.id} with reference {reference}')
            await self.completion_service.announce(ticket=ticket, fee_credit=fee_credit)
            return ticket
