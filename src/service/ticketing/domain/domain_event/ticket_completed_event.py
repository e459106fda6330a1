"""
Ticket Completed Domain Event

Emitted after a transaction that moved a ticket into ``completed`` commits.
The fee ledger consumer applies the pending fee credit recorded in that
same transaction.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

import attrs

from src.service.ticketing.domain.entity.fee_credit_entity import FeeCredit
from src.service.ticketing.domain.entity.ticket_entity import Ticket


@attrs.define(frozen=True)
class TicketCompletedEvent:
    """Minimal event - consumer re-reads the fee credit from DB."""

    ticket_id: int
    user_id: int
    event_id: int
    total_amount: Decimal
    fee_amount: Decimal
    payment_reference: str
    fee_credit_id: Optional[int] = None
    occurred_at: datetime = attrs.field(factory=lambda: datetime.now(timezone.utc))

    @property
    def aggregate_id(self) -> int:
        return self.ticket_id

    @classmethod
    def from_ticket(cls, *, ticket: Ticket, fee_credit: FeeCredit) -> 'TicketCompletedEvent':
        assert ticket.id is not None
        return cls(
            ticket_id=ticket.id,
            user_id=ticket.user_id,
            event_id=ticket.event_id,
            total_amount=ticket.total_amount,
            fee_amount=fee_credit.amount,
            payment_reference=ticket.payment_reference,
            fee_credit_id=fee_credit.id,
        )
