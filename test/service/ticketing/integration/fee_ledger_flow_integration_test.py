"""
End-to-end fee ledger flow against SQLite

initialize -> verify -> TicketCompletedEvent -> FeeLedgerConsumer -> balance
"""

import asyncio
from decimal import Decimal
from unittest.mock import AsyncMock

from anyio import fail_after
import pytest

from src.service.ticketing.app.command.credit_platform_fee_use_case import (
    CreditPlatformFeeUseCase,
)
from src.service.ticketing.app.command.initialize_payment_use_case import (
    InitializePaymentUseCase,
)
from src.service.ticketing.app.command.verify_payment_use_case import VerifyPaymentUseCase
from src.service.ticketing.app.interface.i_payment_gateway import (
    GatewayInitialization,
    GatewayVerification,
)
from src.service.ticketing.app.service.ticket_completion_service import TicketCompletionService
from src.service.ticketing.domain.fee_policy import to_minor_units
from src.service.ticketing.driven_adapter.message_queue.in_memory_ticket_event_publisher_impl import (
    InMemoryTicketEventPublisherImpl,
)
from src.service.ticketing.driving_adapter.event_consumer.fee_ledger_consumer import (
    FeeLedgerConsumer,
)


class LedgerHarness:
    """Wires the real use cases to one database and an in-memory event stream."""

    def __init__(self, *, uow_factory, config) -> None:
        self.gateway = AsyncMock()
        self.gateway.initialize_transaction.side_effect = self._initialize
        self.gateway.verify_transaction.side_effect = self._verify
        self.amounts: dict[str, Decimal] = {}

        self.publisher = InMemoryTicketEventPublisherImpl()
        completion_service = TicketCompletionService(event_publisher=self.publisher, config=config)
        self.initialize = InitializePaymentUseCase(
            uow_factory=uow_factory, payment_gateway=self.gateway, config=config
        )
        self.verify = VerifyPaymentUseCase(
            uow_factory=uow_factory,
            payment_gateway=self.gateway,
            completion_service=completion_service,
            config=config,
        )
        self.credit = CreditPlatformFeeUseCase(uow_factory=uow_factory)
        self.consumer = FeeLedgerConsumer(
            receive_stream=self.publisher.receive_stream,
            credit_platform_fee_use_case=self.credit,
        )

    async def _initialize(self, *, reference: str, amount_minor: int, **kwargs):
        self.amounts[reference] = Decimal(amount_minor) / 100
        return GatewayInitialization(
            authorization_url=f'https://checkout.paystack.test/{reference}', reference=reference
        )

    async def _verify(self, *, reference: str) -> GatewayVerification:
        return GatewayVerification(
            status='success',
            reference=reference,
            amount_minor=to_minor_units(self.amounts[reference]),
            currency='ZAR',
        )

    async def drain(self) -> None:
        await self.publisher.close()
        with fail_after(5.0):
            await self.consumer.run()


@pytest.fixture
def harness(uow_factory, config) -> LedgerHarness:
    return LedgerHarness(uow_factory=uow_factory, config=config)


@pytest.fixture
async def platform(seeder) -> int:
    admin_id = await seeder.user(email='admin@test.com', is_admin=True)
    await seeder.platform_account(user_id=admin_id)
    return admin_id


@pytest.mark.integration
class TestFeeLedgerFlow:
    @pytest.mark.asyncio
    async def test_repeated_verification_credits_once(
        self, seeder, harness: LedgerHarness, platform: int
    ) -> None:
        # Arrange
        buyer_id = await seeder.user(email='buyer@test.com')
        event_id = await seeder.event(owner_id=platform, price=Decimal('100'))
        init = await harness.initialize.initialize_payment(user_id=buyer_id, event_id=event_id)

        # Act - callback and webhook both verify, plus a sequential replay
        concurrent = await asyncio.gather(
            harness.verify.verify_payment(reference=init.reference),
            harness.verify.verify_payment(reference=init.reference),
        )
        replay = await harness.verify.verify_payment(reference=init.reference)
        await harness.drain()

        # Assert
        assert all(result.success for result in concurrent)
        assert sum(1 for result in concurrent if not result.already_processed) == 1
        assert replay.already_processed is True
        assert await seeder.fee_credit_count() == 1
        assert await seeder.balance() == Decimal('15')

    @pytest.mark.asyncio
    async def test_balance_is_fee_rate_times_completed_sales(
        self, seeder, harness: LedgerHarness, platform: int
    ) -> None:
        # Arrange
        event_id = await seeder.event(owner_id=platform, price=Decimal('100'))
        vip_event_id = await seeder.event(owner_id=platform, price=Decimal('300'), title='Gala')
        vip_type_id = await seeder.ticket_type(
            event_id=vip_event_id, price=Decimal('250.50'), quantity=10, name='VIP'
        )
        buyers = [await seeder.user(email=f'buyer{i}@test.com') for i in range(3)]

        # Act
        purchases = [
            await harness.initialize.initialize_payment(user_id=buyers[0], event_id=event_id),
            await harness.initialize.initialize_payment(user_id=buyers[1], event_id=event_id),
            await harness.initialize.initialize_payment(
                user_id=buyers[2], event_id=vip_event_id, ticket_type_id=vip_type_id
            ),
        ]
        for purchase in purchases:
            await harness.verify.verify_payment(reference=purchase.reference)
        await harness.drain()

        # Assert - 0.15 * (100 + 100 + 250.50)
        assert await seeder.balance() == Decimal('67.575')
        assert await seeder.sold_count(ticket_type_id=vip_type_id) == 1

    @pytest.mark.asyncio
    async def test_platform_admin_purchase_adds_no_fee(
        self, seeder, harness: LedgerHarness, platform: int
    ) -> None:
        owner_id = await seeder.user(email='owner@test.com')
        event_id = await seeder.event(owner_id=owner_id, price=Decimal('100'))

        init = await harness.initialize.initialize_payment(user_id=platform, event_id=event_id)
        result = await harness.verify.verify_payment(reference=init.reference)
        await harness.drain()

        assert result.success is True
        assert await seeder.fee_credit_count() == 0
        assert await seeder.balance() == Decimal('0')

    @pytest.mark.asyncio
    async def test_credit_left_pending_is_applied_by_retry(
        self, seeder, harness: LedgerHarness, uow_factory
    ) -> None:
        # Arrange - no platform account yet, so the consumer cannot credit
        admin_id = await seeder.user(email='admin@test.com', is_admin=True)
        buyer_id = await seeder.user(email='buyer@test.com')
        event_id = await seeder.event(owner_id=admin_id, price=Decimal('100'))
        init = await harness.initialize.initialize_payment(user_id=buyer_id, event_id=event_id)
        await harness.verify.verify_payment(reference=init.reference)
        await harness.drain()
        async with uow_factory() as uow:
            assert len(await uow.fee_ledger.list_pending()) == 1

        # Act - startup sequence
        account = await harness.credit.open_platform_account()
        applied = await harness.credit.retry_pending_credits()

        # Assert
        assert account is not None
        assert account.user_id == admin_id
        assert applied == 1
        assert await seeder.balance() == Decimal('15')
