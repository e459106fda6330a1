"""Domain Events"""

from src.service.ticketing.domain.domain_event.ticket_completed_event import TicketCompletedEvent

__all__ = [
    'TicketCompletedEvent',
]
