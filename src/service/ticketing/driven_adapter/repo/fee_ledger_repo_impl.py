"""
Fee Ledger Repository Implementation

Exactly-once crediting:
- fee_credit.ticket_id is unique, so a ticket can only ever get one entry
- mark_credited_and_apply flips pending -> credited with a conditional UPDATE
  and increments the balance in the same transaction, so replays are no-ops
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_fee_ledger_repo import IFeeLedgerRepo
from src.service.ticketing.domain.entity.fee_credit_entity import (
    FeeCredit,
    FeeCreditStatus,
    PlatformAccount,
)
from src.service.ticketing.domain.ticketing_errors import PlatformAccountNotFoundError
from src.service.ticketing.driven_adapter.model.fee_ledger_model import (
    FeeCreditModel,
    PlatformAccountModel,
)


class FeeLedgerRepoImpl(IFeeLedgerRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _credit_to_entity(model: FeeCreditModel) -> FeeCredit:
        return FeeCredit(
            id=model.id,
            ticket_id=model.ticket_id,
            amount=model.amount,
            status=FeeCreditStatus(model.status),
            created_at=model.created_at,
            credited_at=model.credited_at,
        )

    @staticmethod
    def _account_to_entity(model: PlatformAccountModel) -> PlatformAccount:
        return PlatformAccount(
            id=model.id,
            user_id=model.user_id,
            balance=model.balance,
            updated_at=model.updated_at,
        )

    @Logger.io
    async def record_pending_credit(self, *, ticket_id: int, amount: Decimal) -> FeeCredit:
        model = FeeCreditModel(
            ticket_id=ticket_id,
            amount=amount,
            status=FeeCreditStatus.PENDING.value,
            created_at=datetime.now(timezone.utc),
        )
        self.session.add(model)
        await self.session.flush()
        return self._credit_to_entity(model)

    @Logger.io
    async def get_credit_by_ticket(self, *, ticket_id: int) -> Optional[FeeCredit]:
        result = await self.session.execute(
            select(FeeCreditModel).where(FeeCreditModel.ticket_id == ticket_id)
        )
        model = result.scalar_one_or_none()
        return self._credit_to_entity(model) if model else None

    @Logger.io
    async def mark_credited_and_apply(self, *, credit_id: int) -> Optional[FeeCredit]:
        now = datetime.now(timezone.utc)
        result = await self.session.execute(
            update(FeeCreditModel)
            .where(
                FeeCreditModel.id == credit_id,
                FeeCreditModel.status == FeeCreditStatus.PENDING.value,
            )
            .values(status=FeeCreditStatus.CREDITED.value, credited_at=now)
            .returning(FeeCreditModel)
            .execution_options(populate_existing=True)
        )
        credit = result.scalar_one_or_none()
        if credit is None:
            return None

        account_id = (
            await self.session.execute(
                select(PlatformAccountModel.id).order_by(PlatformAccountModel.id).limit(1)
            )
        ).scalar_one_or_none()
        if account_id is None:
            raise PlatformAccountNotFoundError()

        await self.session.execute(
            update(PlatformAccountModel)
            .where(PlatformAccountModel.id == account_id)
            .values(balance=PlatformAccountModel.balance + credit.amount, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        return self._credit_to_entity(credit)

    @Logger.io
    async def list_pending(self) -> List[FeeCredit]:
        result = await self.session.execute(
            select(FeeCreditModel)
            .where(FeeCreditModel.status == FeeCreditStatus.PENDING.value)
            .order_by(FeeCreditModel.id)
        )
        return [self._credit_to_entity(model) for model in result.scalars().all()]

    @Logger.io
    async def get_platform_account(self) -> Optional[PlatformAccount]:
        result = await self.session.execute(
            select(PlatformAccountModel).order_by(PlatformAccountModel.id).limit(1)
        )
        model = result.scalar_one_or_none()
        return self._account_to_entity(model) if model else None

    @Logger.io
    async def open_platform_account(self, *, user_id: int) -> PlatformAccount:
        existing = await self.get_platform_account()
        if existing is not None:
            return existing

        model = PlatformAccountModel(
            user_id=user_id,
            balance=Decimal('0'),
            updated_at=datetime.now(timezone.utc),
        )
        self.session.add(model)
        await self.session.flush()
        Logger.base.info(f'🏦 [FEE] Opened platform account for admin user {user_id}')
        return self._account_to_entity(model)
