"""
Unit tests for the in-memory publisher and the fee ledger consumer

Publisher -> memory stream -> FeeLedgerConsumer -> CreditPlatformFeeUseCase
"""

from decimal import Decimal
from unittest.mock import AsyncMock

from anyio import create_task_group, fail_after
import pytest

from src.service.ticketing.domain.domain_event.ticket_completed_event import TicketCompletedEvent
from src.service.ticketing.domain.ticketing_errors import FeeCreditFailure
from src.service.ticketing.driven_adapter.message_queue.in_memory_ticket_event_publisher_impl import (
    InMemoryTicketEventPublisherImpl,
)
from src.service.ticketing.driving_adapter.event_consumer.fee_ledger_consumer import (
    FeeLedgerConsumer,
)


def _event(ticket_id: int, fee_credit_id: int | None = None) -> TicketCompletedEvent:
    return TicketCompletedEvent(
        ticket_id=ticket_id,
        user_id=12,
        event_id=5,
        total_amount=Decimal('100'),
        fee_amount=Decimal('15'),
        payment_reference=f'5-1760000000000-{ticket_id}',
        fee_credit_id=fee_credit_id,
    )


@pytest.mark.unit
class TestInMemoryTicketEventPublisher:
    @pytest.fixture
    def publisher(self) -> InMemoryTicketEventPublisherImpl:
        return InMemoryTicketEventPublisherImpl()

    @pytest.mark.asyncio
    async def test_published_event_reaches_receive_stream(self, publisher) -> None:
        event = _event(41, fee_credit_id=7)

        await publisher.publish_ticket_completed(event=event)

        with fail_after(1.0):
            received = await publisher.receive_stream.receive()
        assert received == event

    @pytest.mark.asyncio
    async def test_publish_never_blocks_without_consumer(self, publisher) -> None:
        with fail_after(1.0):
            for ticket_id in range(500):
                await publisher.publish_ticket_completed(event=_event(ticket_id, ticket_id))

    @pytest.mark.asyncio
    async def test_publish_after_close_raises_fee_credit_failure(self, publisher) -> None:
        await publisher.close()

        with pytest.raises(FeeCreditFailure) as exc_info:
            await publisher.publish_ticket_completed(event=_event(41, fee_credit_id=7))

        assert exc_info.value.ticket_id == 41


@pytest.mark.unit
class TestFeeLedgerConsumer:
    @pytest.fixture
    def publisher(self) -> InMemoryTicketEventPublisherImpl:
        return InMemoryTicketEventPublisherImpl()

    @pytest.fixture
    def mock_credit_use_case(self) -> AsyncMock:
        use_case = AsyncMock()
        use_case.credit_fee = AsyncMock()
        return use_case

    @pytest.fixture
    def consumer(self, publisher, mock_credit_use_case: AsyncMock) -> FeeLedgerConsumer:
        return FeeLedgerConsumer(
            receive_stream=publisher.receive_stream,
            credit_platform_fee_use_case=mock_credit_use_case,
        )

    @pytest.mark.asyncio
    async def test_run_credits_each_event_until_stream_closes(
        self, publisher, consumer, mock_credit_use_case: AsyncMock
    ) -> None:
        # Arrange
        await publisher.publish_ticket_completed(event=_event(41, fee_credit_id=7))
        await publisher.publish_ticket_completed(event=_event(42, fee_credit_id=8))
        await publisher.close()

        # Act - run returns once the queued events are drained
        with fail_after(2.0):
            async with create_task_group() as tg:
                tg.start_soon(consumer.run)

        # Assert
        assert mock_credit_use_case.credit_fee.await_count == 2
        mock_credit_use_case.credit_fee.assert_any_await(fee_credit_id=7, ticket_id=41)
        mock_credit_use_case.credit_fee.assert_any_await(fee_credit_id=8, ticket_id=42)

    @pytest.mark.asyncio
    async def test_failed_credit_does_not_stop_consumer(
        self, publisher, consumer, mock_credit_use_case: AsyncMock
    ) -> None:
        # Arrange - first credit fails, second succeeds
        mock_credit_use_case.credit_fee.side_effect = [
            FeeCreditFailure(41, 'No admin account found to credit platform fee'),
            None,
        ]
        await publisher.publish_ticket_completed(event=_event(41, fee_credit_id=7))
        await publisher.publish_ticket_completed(event=_event(42, fee_credit_id=8))
        await publisher.close()

        # Act
        with fail_after(2.0):
            await consumer.run()

        # Assert
        assert mock_credit_use_case.credit_fee.await_count == 2

    @pytest.mark.asyncio
    async def test_unexpected_error_is_logged_not_raised(
        self, consumer, mock_credit_use_case: AsyncMock
    ) -> None:
        mock_credit_use_case.credit_fee.side_effect = RuntimeError('database is locked')

        await consumer.handle(_event(41, fee_credit_id=7))

        mock_credit_use_case.credit_fee.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_event_without_credit_id_is_skipped(
        self, consumer, mock_credit_use_case: AsyncMock
    ) -> None:
        await consumer.handle(_event(41, fee_credit_id=None))

        mock_credit_use_case.credit_fee.assert_not_awaited()
