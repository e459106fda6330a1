"""
Credit Platform Fee Use Case

Applies pending fee credits to the platform account balance. Driven by the
fee ledger consumer (one credit per TicketCompletedEvent) and by the startup
retry pass. Never called inside a purchase transaction, so a ledger failure
cannot block or roll back a ticket completion.
"""

from typing import Optional

from opentelemetry import trace

from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.domain.entity.fee_credit_entity import FeeCredit, PlatformAccount
from src.service.ticketing.domain.ticketing_errors import (
    FeeCreditFailure,
    PlatformAccountNotFoundError,
)


class CreditPlatformFeeUseCase:
    def __init__(self, *, uow_factory: UnitOfWorkFactory) -> None:
        self.uow_factory = uow_factory
        self.tracer = trace.get_tracer(__name__)

    @Logger.io
    async def credit_fee(self, *, fee_credit_id: int, ticket_id: int) -> Optional[FeeCredit]:
        """
        Flip one pending credit to credited and add it to the balance atomically.

        Returns:
            The credited entry, or None when it had already been applied

        Raises:
            FeeCreditFailure: No platform account exists; the credit stays pending
        """
        with self.tracer.start_as_current_span(
            'use_case.credit_platform_fee',
            attributes={'fee_credit.id': fee_credit_id, 'ticket.id': ticket_id},
        ):
            async with self.uow_factory() as uow:
                try:
                    credited = await uow.fee_ledger.mark_credited_and_apply(
                        credit_id=fee_credit_id
                    )
                except PlatformAccountNotFoundError as e:
                    raise FeeCreditFailure(ticket_id, e.message) from e
                await uow.commit()

            if credited is None:
                Logger.base.info(f'🔁 [FEE] Credit {fee_credit_id} already applied, skipping')
            else:
                Logger.base.info(
                    f'💰 [FEE] Credited {credited.amount} for ticket {credited.ticket_id}'
                )
            return credited

    @Logger.io
    async def retry_pending_credits(self) -> int:
        """
        Re-apply every credit still pending (e.g. published before a crash).

        Returns:
            Number of credits applied by this pass
        """
        async with self.uow_factory() as uow:
            pending = await uow.fee_ledger.list_pending()

        applied = 0
        for credit in pending:
            assert credit.id is not None
            try:
                if await self.credit_fee(fee_credit_id=credit.id, ticket_id=credit.ticket_id):
                    applied += 1
            except FeeCreditFailure as e:
                Logger.base.warning(f'⚠️ [FEE] {e.message}')
                break

        Logger.base.info(f'🔄 [FEE] Retry pass applied {applied}/{len(pending)} pending credits')
        return applied

    @Logger.io
    async def open_platform_account(self) -> Optional[PlatformAccount]:
        """Ensure the admin user has the platform account row; None when no admin exists."""
        async with self.uow_factory() as uow:
            admin = await uow.users.get_admin_account()
            if admin is None:
                Logger.base.warning('⚠️ [FEE] No admin user, platform account not opened')
                return None
            account = await uow.fee_ledger.open_platform_account(user_id=admin.id)
            await uow.commit()
        return account
