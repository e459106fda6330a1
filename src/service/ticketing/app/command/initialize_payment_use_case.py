from typing import Optional, Self
from urllib.parse import urlencode

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.core_setting import Settings
from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.dto.payment_result import PaymentInitialization
from src.service.ticketing.app.interface.i_payment_gateway import IPaymentGateway
from src.service.ticketing.app.service.purchase_guard import reserve_and_create, validate_purchase
from src.service.ticketing.domain.entity.ticket_entity import Ticket
from src.service.ticketing.domain.enum.payment_status import PaymentStatus
from src.service.ticketing.domain.fee_policy import to_minor_units
from src.service.ticketing.domain.ticketing_errors import GatewayError
from src.service.ticketing.domain.value_object.payment_reference import PaymentReference


class InitializePaymentUseCase:
    """
    Paid purchase flow

    Flow:
    1. Validate buyer, event, ticket type and restrictions (Fail Fast)
    2. In one transaction: reserve a ticket-type unit and insert a pending ticket
    3. Initialize the gateway transaction with the ticket reference
    4. Return the hosted payment URL

    A gateway failure leaves the pending ticket in place; a later verify call
    with the same reference resolves it.
    """

    def __init__(
        self,
        *,
        uow_factory: UnitOfWorkFactory,
        payment_gateway: IPaymentGateway,
        config: Settings,
    ) -> None:
        self.uow_factory = uow_factory
        self.payment_gateway = payment_gateway
        self.config = config
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work.provider]),
        payment_gateway: IPaymentGateway = Depends(Provide[Container.payment_gateway]),
        config: Settings = Depends(Provide[Container.config_service]),
    ) -> Self:
        return cls(uow_factory=uow_factory, payment_gateway=payment_gateway, config=config)

    @Logger.io
    async def initialize_payment(
        self,
        *,
        user_id: int,
        event_id: int,
        ticket_type_id: Optional[int] = None,
    ) -> PaymentInitialization:
        """
        Args:
            user_id: Buyer id (from the authenticated session)
            event_id: Event being purchased
            ticket_type_id: Optional ticket type; its price overrides the event price

        Returns:
            Payment URL and reference for the client to complete checkout

        Raises:
            GatewayError: The gateway could not initialize the transaction
        """
        with self.tracer.start_as_current_span(
            'use_case.initialize_payment',
            attributes={'event.id': event_id, 'user.id': user_id},
        ):
            async with self.uow_factory() as uow:
                context = await validate_purchase(
                    uow=uow, user_id=user_id, event_id=event_id, ticket_type_id=ticket_type_id
                )
                reference = PaymentReference.build_paid(
                    event_id=event_id, user_id=user_id, ticket_type_id=ticket_type_id
                )
                ticket = Ticket.create(
                    user_id=user_id,
                    event_id=event_id,
                    ticket_type_id=ticket_type_id,
                    total_amount=context.amount,
                    payment_reference=str(reference),
                    payment_status=PaymentStatus.PENDING,
                )
                ticket = await reserve_and_create(uow=uow, ticket=ticket)
                await uow.commit()

            Logger.base.info(
                f'🎟️ [PAYMENT-INIT] Pending ticket {ticket.id} created with reference {reference}'
            )

            callback_query = urlencode({'reference': str(reference), 'amount': str(context.amount)})
            callback_url = (
                f'{self.config.PAYMENT_CALLBACK_BASE_URL.rstrip("/")}/payment/success?{callback_query}'
            )
            metadata = {
                'event_id': event_id,
                'user_id': user_id,
                'ticket_id': ticket.id,
                'ticket_type_id': ticket_type_id,
                'event_title': context.event.title,
                'ticket_type_name': context.ticket_type.name if context.ticket_type else None,
            }

            try:
                gateway_result = await self.payment_gateway.initialize_transaction(
                    email=context.user.email,
                    amount_minor=to_minor_units(context.amount),
                    currency=self.config.PAYMENT_CURRENCY,
                    reference=str(reference),
                    callback_url=callback_url,
                    metadata=metadata,
                )
            except GatewayError:
                Logger.base.warning(
                    f'⚠️ [PAYMENT-INIT] Gateway failed, ticket {ticket.id} stays pending '
                    f'for reference {reference}'
                )
                raise

            return PaymentInitialization(
                payment_url=gateway_result.authorization_url,
                reference=str(reference),
                ticket=ticket,
            )
