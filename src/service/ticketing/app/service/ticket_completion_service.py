"""
Ticket Completion Service

Shared by every path that ends with a ``completed`` ticket (paid verify,
verify recovery, free registration, test tickets).

Flow:
1. record_fee() runs inside the caller's unit of work, before commit, and
   appends a pending fee credit for the ticket (one per ticket, enforced by
   a unique ticket_id)
2. The caller commits ticket + credit together
3. announce() publishes TicketCompletedEvent; the fee ledger consumer
   applies the credit to the platform balance asynchronously
"""

from decimal import Decimal
from typing import Optional

from src.platform.config.core_setting import Settings
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_ticket_event_publisher import ITicketEventPublisher
from src.service.ticketing.domain.domain_event.ticket_completed_event import TicketCompletedEvent
from src.service.ticketing.domain.entity.fee_credit_entity import FeeCredit
from src.service.ticketing.domain.entity.ticket_entity import Ticket
from src.service.ticketing.domain.fee_policy import fee_for_completed_ticket


def is_test_transaction(
    *, reference: str, amount: Optional[Decimal], config: Settings
) -> bool:
    """Sandbox bypass predicate. Never true when the bypass is disabled or the gateway is live."""
    if not config.PAYMENT_TEST_MODE_ENABLED or config.is_live_payment_mode:
        return False
    if '-test' in reference:
        return True
    return amount is not None and Decimal(amount) <= config.PAYMENT_TEST_MAX_AMOUNT


class TicketCompletionService:
    def __init__(self, *, event_publisher: ITicketEventPublisher, config: Settings) -> None:
        self.event_publisher = event_publisher
        self.config = config

    @Logger.io
    async def record_fee(self, *, uow: AbstractUnitOfWork, ticket: Ticket) -> Optional[FeeCredit]:
        assert ticket.id is not None
        buyer = await uow.users.get_by_id(user_id=ticket.user_id)
        fee = fee_for_completed_ticket(
            ticket_amount=ticket.total_amount,
            buyer_is_admin=bool(buyer and buyer.is_admin),
            rate=self.config.PLATFORM_FEE_RATE,
        )
        if fee is None:
            Logger.base.info(
                f'🏦 [FEE] Ticket {ticket.id} bought by platform account, no fee recorded'
            )
            return None

        credit = await uow.fee_ledger.record_pending_credit(ticket_id=ticket.id, amount=fee)
        Logger.base.info(f'🧾 [FEE] Recorded pending credit {fee} for ticket {ticket.id}')
        return credit

    async def announce(self, *, ticket: Ticket, fee_credit: Optional[FeeCredit]) -> None:
        if fee_credit is None:
            return
        event = TicketCompletedEvent.from_ticket(ticket=ticket, fee_credit=fee_credit)
        try:
            await self.event_publisher.publish_ticket_completed(event=event)
        except Exception as e:
            # Credit row is committed as pending; the retry pass applies it
            Logger.base.error(
                f'❌ [FEE] Failed to publish completion of ticket {ticket.id}: {e}'
            )
