"""
Integration tests for FeeLedgerRepoImpl

A credit is applied to the platform balance exactly once; replays match no
pending row and change nothing.
"""

from decimal import Decimal

import pytest

from src.service.ticketing.domain.entity.fee_credit_entity import FeeCreditStatus
from src.service.ticketing.domain.entity.ticket_entity import Ticket
from src.service.ticketing.domain.enum.payment_status import PaymentStatus
from src.service.ticketing.domain.ticketing_errors import PlatformAccountNotFoundError


@pytest.fixture
async def completed_ticket_id(seeder, uow_factory) -> int:
    owner_id = await seeder.user(email='owner@test.com')
    buyer_id = await seeder.user(email='buyer@test.com')
    event_id = await seeder.event(owner_id=owner_id)
    async with uow_factory() as uow:
        ticket = await uow.tickets.create(
            ticket=Ticket.create(
                user_id=buyer_id,
                event_id=event_id,
                total_amount=Decimal('100'),
                payment_reference='ref-1',
                payment_status=PaymentStatus.COMPLETED,
            )
        )
        await uow.commit()
    assert ticket.id is not None
    return ticket.id


@pytest.mark.integration
class TestFeeLedgerRepo:
    @pytest.mark.asyncio
    async def test_credit_applies_once(self, seeder, uow_factory, completed_ticket_id) -> None:
        # Arrange
        admin_id = await seeder.user(email='admin@test.com', is_admin=True)
        await seeder.platform_account(user_id=admin_id)
        async with uow_factory() as uow:
            credit = await uow.fee_ledger.record_pending_credit(
                ticket_id=completed_ticket_id, amount=Decimal('15')
            )
            await uow.commit()
        assert credit.id is not None

        # Act
        async with uow_factory() as uow:
            first = await uow.fee_ledger.mark_credited_and_apply(credit_id=credit.id)
            await uow.commit()
        async with uow_factory() as uow:
            second = await uow.fee_ledger.mark_credited_and_apply(credit_id=credit.id)
            await uow.commit()

        # Assert
        assert first is not None
        assert first.status == FeeCreditStatus.CREDITED
        assert first.credited_at is not None
        assert second is None
        assert await seeder.balance() == Decimal('15')
        async with uow_factory() as uow:
            assert await uow.fee_ledger.list_pending() == []

    @pytest.mark.asyncio
    async def test_missing_account_keeps_credit_pending(
        self, uow_factory, completed_ticket_id
    ) -> None:
        # Arrange
        async with uow_factory() as uow:
            credit = await uow.fee_ledger.record_pending_credit(
                ticket_id=completed_ticket_id, amount=Decimal('15')
            )
            await uow.commit()
        assert credit.id is not None

        # Act
        with pytest.raises(PlatformAccountNotFoundError):
            async with uow_factory() as uow:
                await uow.fee_ledger.mark_credited_and_apply(credit_id=credit.id)
                await uow.commit()

        # Assert - rolled back, still pending
        async with uow_factory() as uow:
            pending = await uow.fee_ledger.list_pending()
        assert [p.id for p in pending] == [credit.id]

    @pytest.mark.asyncio
    async def test_open_platform_account_is_idempotent(self, seeder, uow_factory) -> None:
        admin_id = await seeder.user(email='admin@test.com', is_admin=True)

        async with uow_factory() as uow:
            first = await uow.fee_ledger.open_platform_account(user_id=admin_id)
            await uow.commit()
        async with uow_factory() as uow:
            second = await uow.fee_ledger.open_platform_account(user_id=admin_id)
            await uow.commit()

        assert first.id == second.id
        assert second.balance == Decimal('0')
