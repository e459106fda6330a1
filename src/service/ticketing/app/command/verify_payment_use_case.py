from decimal import Decimal
from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.core_setting import Settings
from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.exception.exceptions import AuthenticationError
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.dto.payment_result import VerificationResult
from src.service.ticketing.app.interface.i_payment_gateway import (
    GatewayVerification,
    IPaymentGateway,
)
from src.service.ticketing.app.service.purchase_guard import reserve_and_create
from src.service.ticketing.app.service.ticket_completion_service import (
    TicketCompletionService,
    is_test_transaction,
)
from src.service.ticketing.domain.entity.ticket_entity import Ticket
from src.service.ticketing.domain.enum.payment_status import PaymentStatus
from src.service.ticketing.domain.fee_policy import from_minor_units, to_minor_units
from src.service.ticketing.domain.ticketing_errors import (
    EventNotFoundError,
    GatewayError,
    ReferenceCollisionError,
    TicketTypeNotFoundError,
)
from src.service.ticketing.domain.value_object.payment_reference import PaymentReference


class VerifyPaymentUseCase:
    """
    Resolve a payment reference to a terminal ticket

    Flow:
    1. Ticket already completed -> already processed, nothing is re-credited
    2. Ticket already failed -> returned as-is
    3. Ticket pending -> ask the gateway; success completes it (fee recorded
       in the same transaction), anything else fails it and releases its unit
    4. Gateway unreachable -> sandbox bypass for test/low-amount references,
       otherwise GatewayError and the ticket stays pending for a retry
    5. No local ticket -> recover from the reference: parse the event id,
       re-check the event and create a completed ticket from the verified amount
    """

    def __init__(
        self,
        *,
        uow_factory: UnitOfWorkFactory,
        payment_gateway: IPaymentGateway,
        completion_service: TicketCompletionService,
        config: Settings,
    ) -> None:
        self.uow_factory = uow_factory
        self.payment_gateway = payment_gateway
        self.completion_service = completion_service
        self.config = config
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work.provider]),
        payment_gateway: IPaymentGateway = Depends(Provide[Container.payment_gateway]),
        completion_service: TicketCompletionService = Depends(
            Provide[Container.ticket_completion_service]
        ),
        config: Settings = Depends(Provide[Container.config_service]),
    ) -> Self:
        return cls(
            uow_factory=uow_factory,
            payment_gateway=payment_gateway,
            completion_service=completion_service,
            config=config,
        )

    @Logger.io
    async def verify_payment(
        self,
        *,
        reference: str,
        amount: Optional[Decimal] = None,
        user_id: Optional[int] = None,
    ) -> VerificationResult:
        """
        Args:
            reference: Payment reference returned by initialize
            amount: Amount echoed back on the callback URL, if any
            user_id: Caller, used for recovery when the reference carries no user id

        Raises:
            GatewayError: Gateway unreachable and the reference is not a test transaction
            ReferenceParseError: No local ticket and the reference has no event id
            EventNotFoundError: No local ticket and the referenced event is gone
        """
        with self.tracer.start_as_current_span(
            'use_case.verify_payment',
            attributes={'payment.reference': reference},
        ):
            async with self.uow_factory() as uow:
                ticket = await uow.tickets.get_by_reference(reference=reference)

            if ticket is None:
                return await self._recover_without_ticket(
                    reference=reference, amount=amount, user_id=user_id
                )

            if ticket.payment_status == PaymentStatus.COMPLETED:
                Logger.base.info(f'🔁 [VERIFY] Reference {reference} already processed')
                return VerificationResult(success=True, ticket=ticket, already_processed=True)

            if ticket.payment_status == PaymentStatus.FAILED:
                return VerificationResult(success=False, ticket=ticket)

            return await self._resolve_pending(ticket=ticket, amount=amount)

    async def _resolve_pending(
        self, *, ticket: Ticket, amount: Optional[Decimal]
    ) -> VerificationResult:
        reference = ticket.payment_reference
        try:
            verification = await self.payment_gateway.verify_transaction(reference=reference)
        except GatewayError:
            bypass_amount = amount if amount is not None else ticket.total_amount
            if not is_test_transaction(
                reference=reference, amount=bypass_amount, config=self.config
            ):
                Logger.base.warning(f'⚠️ [VERIFY] Gateway error, {reference} stays pending')
                raise
            Logger.base.warning(f'🧪 [VERIFY] Gateway error, completing {reference} in test mode')
            return await self._complete(ticket=ticket, test_mode=True)

        if verification.is_success:
            expected_minor = to_minor_units(ticket.total_amount)
            if verification.amount_minor != expected_minor:
                Logger.base.warning(
                    f'⚠️ [VERIFY] Amount mismatch for {reference}: '
                    f'gateway={verification.amount_minor} expected={expected_minor}'
                )
            return await self._complete(
                ticket=ticket, test_mode=False, gateway_status=verification.status
            )

        return await self._fail(ticket=ticket, gateway_status=verification.status)

    async def _complete(
        self, *, ticket: Ticket, test_mode: bool, gateway_status: Optional[str] = None
    ) -> VerificationResult:
        assert ticket.id is not None
        ticket.validate_transition(PaymentStatus.COMPLETED)
        async with self.uow_factory() as uow:
            change = await uow.tickets.update_status(
                ticket_id=ticket.id, new_status=PaymentStatus.COMPLETED
            )
            if not change.transitioned:
                # A concurrent verify completed it first and recorded the fee
                return VerificationResult(
                    success=True,
                    ticket=change.ticket,
                    already_processed=True,
                    gateway_status=gateway_status,
                )
            fee_credit = await self.completion_service.record_fee(uow=uow, ticket=change.ticket)
            await uow.commit()

        Logger.base.info(f'✅ [VERIFY] Ticket {ticket.id} completed')
        await self.completion_service.announce(ticket=change.ticket, fee_credit=fee_credit)
        return VerificationResult(
            success=True,
            ticket=change.ticket,
            test_mode=test_mode,
            gateway_status=gateway_status,
        )

    async def _fail(self, *, ticket: Ticket, gateway_status: str) -> VerificationResult:
        assert ticket.id is not None
        async with self.uow_factory() as uow:
            change = await uow.tickets.update_status(
                ticket_id=ticket.id, new_status=PaymentStatus.FAILED
            )
            if change.transitioned and change.ticket.ticket_type_id is not None:
                await uow.ticket_types.release_unit(ticket_type_id=change.ticket.ticket_type_id)
            await uow.commit()

        Logger.base.info(f'❌ [VERIFY] Ticket {ticket.id} failed (gateway status {gateway_status})')
        return VerificationResult(
            success=False, ticket=change.ticket, gateway_status=gateway_status
        )

    async def _recover_without_ticket(
        self, *, reference: str, amount: Optional[Decimal], user_id: Optional[int]
    ) -> VerificationResult:
        parsed = PaymentReference.parse(reference)
        buyer_id = parsed.user_id if parsed.user_id is not None else user_id
        if buyer_id is None:
            raise AuthenticationError('Authentication required to recover this payment')

        async with self.uow_factory() as uow:
            event = await uow.events.get_by_id(event_id=parsed.event_id)
        if event is None:
            raise EventNotFoundError(parsed.event_id)

        Logger.base.info(f'🩹 [VERIFY] No ticket for {reference}, recovering for event {event.id}')

        if is_test_transaction(reference=reference, amount=amount, config=self.config):
            return await self._create_completed(
                reference=reference,
                user_id=buyer_id,
                event_id=event.id,
                ticket_type_id=parsed.ticket_type_id,
                total_amount=amount if amount is not None else event.price,
                test_mode=True,
            )

        verification = await self.payment_gateway.verify_transaction(reference=reference)
        if not verification.is_success:
            return VerificationResult(
                success=False, ticket=None, gateway_status=verification.status
            )

        return await self._create_completed(
            reference=reference,
            user_id=buyer_id,
            event_id=event.id,
            ticket_type_id=self._ticket_type_from(verification, parsed),
            total_amount=from_minor_units(verification.amount_minor),
            test_mode=False,
            gateway_status=verification.status,
        )

    @staticmethod
    def _ticket_type_from(
        verification: GatewayVerification, parsed: PaymentReference
    ) -> Optional[int]:
        raw = str(verification.metadata.get('ticket_type_id') or '')
        if raw.isascii() and raw.isdigit():
            return int(raw)
        return parsed.ticket_type_id

    async def _create_completed(
        self,
        *,
        reference: str,
        user_id: int,
        event_id: int,
        ticket_type_id: Optional[int],
        total_amount: Decimal,
        test_mode: bool,
        gateway_status: Optional[str] = None,
    ) -> VerificationResult:
        ticket = Ticket.create(
            user_id=user_id,
            event_id=event_id,
            ticket_type_id=ticket_type_id,
            total_amount=total_amount,
            payment_reference=reference,
            payment_status=PaymentStatus.COMPLETED,
        )
        try:
            async with self.uow_factory() as uow:
                if ticket_type_id is not None:
                    ticket_type = await uow.ticket_types.get_by_id(ticket_type_id=ticket_type_id)
                    if ticket_type is None or ticket_type.event_id != event_id:
                        raise TicketTypeNotFoundError(ticket_type_id)
                created = await reserve_and_create(uow=uow, ticket=ticket)
                fee_credit = await self.completion_service.record_fee(uow=uow, ticket=created)
                await uow.commit()
        except ReferenceCollisionError:
            # Lost a race with a concurrent verify of the same reference
            async with self.uow_factory() as uow:
                existing = await uow.tickets.get_by_reference(reference=reference)
            if existing is None:
                raise
            return VerificationResult(
                success=existing.is_completed,
                ticket=existing,
                already_processed=existing.is_completed,
                gateway_status=gateway_status,
            )

        Logger.base.info(f'✅ [VERIFY] Recovered ticket {created.id} for {reference}')
        await self.completion_service.announce(ticket=created, fee_credit=fee_credit)
        return VerificationResult(
            success=True,
            ticket=created,
            test_mode=test_mode,
            gateway_status=gateway_status,
        )
