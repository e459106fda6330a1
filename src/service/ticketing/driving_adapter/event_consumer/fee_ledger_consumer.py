"""
Fee Ledger Consumer

Drains TicketCompletedEvent from the in-process stream and credits the
platform fee for each one.

Important:
- Runs in the application task group, outside any purchase transaction
- A failed credit is logged and left pending; the consumer keeps running
  and the startup retry pass re-applies it
"""

from anyio.streams.memory import MemoryObjectReceiveStream
from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.command.credit_platform_fee_use_case import (
    CreditPlatformFeeUseCase,
)
from src.service.ticketing.domain.domain_event.ticket_completed_event import TicketCompletedEvent
from src.service.ticketing.domain.ticketing_errors import FeeCreditFailure


class FeeLedgerConsumer:
    def __init__(
        self,
        *,
        receive_stream: MemoryObjectReceiveStream[TicketCompletedEvent],
        credit_platform_fee_use_case: CreditPlatformFeeUseCase,
    ) -> None:
        self.receive_stream = receive_stream
        self.credit_platform_fee_use_case = credit_platform_fee_use_case
        self.tracer = trace.get_tracer(__name__)

    async def run(self) -> None:
        Logger.base.info('📥 [FEE-CONSUMER] Listening for completed tickets')
        async with self.receive_stream:
            async for event in self.receive_stream:
                await self.handle(event)
        Logger.base.info('🛑 [FEE-CONSUMER] Stream closed, consumer stopped')

    async def handle(self, event: TicketCompletedEvent) -> None:
        if event.fee_credit_id is None:
            Logger.base.warning(f'⚠️ [FEE-CONSUMER] Ticket {event.ticket_id} has no fee credit id')
            return

        with self.tracer.start_as_current_span(
            'consumer.fee_ledger',
            attributes={'ticket.id': event.ticket_id, 'fee_credit.id': event.fee_credit_id},
        ):
            try:
                await self.credit_platform_fee_use_case.credit_fee(
                    fee_credit_id=event.fee_credit_id, ticket_id=event.ticket_id
                )
            except FeeCreditFailure as e:
                Logger.base.warning(f'⚠️ [FEE-CONSUMER] {e.message}, left pending for retry')
            except Exception as e:
                Logger.base.exception(
                    f'❌ [FEE-CONSUMER] Unexpected error crediting ticket {event.ticket_id}: {e}'
                )
