"""
In-memory Ticket Event Publisher Implementation

Single-process message stream between use cases and the fee ledger consumer.

Architecture:
- Use Case (after commit) -> publish_ticket_completed() -> send stream
- FeeLedgerConsumer drains the receive stream in the app task group
- Unbounded buffer: publishing never blocks a purchase request
"""

import math

from anyio import BrokenResourceError, ClosedResourceError, create_memory_object_stream
from anyio.streams.memory import MemoryObjectReceiveStream, MemoryObjectSendStream

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_ticket_event_publisher import ITicketEventPublisher
from src.service.ticketing.domain.domain_event.ticket_completed_event import TicketCompletedEvent
from src.service.ticketing.domain.ticketing_errors import FeeCreditFailure


class InMemoryTicketEventPublisherImpl(ITicketEventPublisher):
    def __init__(self) -> None:
        self._send_stream: MemoryObjectSendStream[TicketCompletedEvent]
        self._receive_stream: MemoryObjectReceiveStream[TicketCompletedEvent]
        self._send_stream, self._receive_stream = create_memory_object_stream[
            TicketCompletedEvent
        ](max_buffer_size=math.inf)

    @property
    def receive_stream(self) -> MemoryObjectReceiveStream[TicketCompletedEvent]:
        return self._receive_stream

    async def publish_ticket_completed(self, *, event: TicketCompletedEvent) -> None:
        try:
            self._send_stream.send_nowait(event)
        except (BrokenResourceError, ClosedResourceError) as e:
            raise FeeCreditFailure(event.ticket_id, 'fee ledger stream is closed') from e
        Logger.base.debug(f'📤 [PUBLISHER] Queued TicketCompleted for ticket {event.ticket_id}')

    async def close(self) -> None:
        await self._send_stream.aclose()
