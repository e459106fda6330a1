"""
Ticket Event Publisher Interface

Use cases depend on this port to announce committed ticket completions.
"""

from abc import ABC, abstractmethod

from src.service.ticketing.domain.domain_event.ticket_completed_event import TicketCompletedEvent


class ITicketEventPublisher(ABC):
    @abstractmethod
    async def publish_ticket_completed(self, *, event: TicketCompletedEvent) -> None:
        """
        Publish after the completing transaction has committed.

        Publishing failures must not surface to the buyer; the fee credit
        stays pending and is picked up by the retry pass.
        """
        pass
