"""Purchase flow result DTOs."""

from typing import Optional

import attrs

from src.service.ticketing.domain.entity.ticket_entity import Ticket


@attrs.define(frozen=True)
class PaymentInitialization:
    """Hosted checkout handed back to the buyer, plus the pending ticket behind it."""

    payment_url: str
    reference: str
    ticket: Ticket


@attrs.define(frozen=True)
class VerificationResult:
    """
    Outcome of resolving a payment reference.

    already_processed is True when the ticket was completed before this call.
    test_mode is True when the ticket was completed through the sandbox bypass.
    ticket is None only when no local ticket existed and the gateway did not confirm.
    """

    success: bool
    ticket: Optional[Ticket]
    already_processed: bool = False
    test_mode: bool = False
    gateway_status: Optional[str] = None
