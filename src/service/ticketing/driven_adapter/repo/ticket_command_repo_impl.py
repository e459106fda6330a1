"""
Ticket Command Repository Implementation

Concurrency guarantees come from the storage layer, not from read-then-write:
- Partial unique index uq_ticket_active_user_event rejects a second
  pending/completed ticket for the same (user, event)
- Unique index uq_ticket_payment_reference rejects a reused reference
- update_status is a conditional UPDATE ... WHERE payment_status = 'pending',
  so a terminal status can never be overwritten
"""

from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_ticket_command_repo import (
    ITicketCommandRepo,
    StatusChange,
)
from src.service.ticketing.domain.entity.ticket_entity import Ticket
from src.service.ticketing.domain.enum.payment_status import (
    ACTIVE_PAYMENT_STATUSES,
    PaymentStatus,
)
from src.service.ticketing.domain.ticketing_errors import (
    DuplicateTicketError,
    InvalidTransitionError,
    ReferenceCollisionError,
    TicketNotFoundError,
)
from src.service.ticketing.driven_adapter.model.ticket_model import TicketModel


def _is_reference_conflict(error: IntegrityError) -> bool:
    message = str(error.orig)
    return 'uq_ticket_payment_reference' in message or 'ticket.payment_reference' in message


def _is_active_ticket_conflict(error: IntegrityError) -> bool:
    message = str(error.orig)
    return 'uq_ticket_active_user_event' in message or 'ticket.user_id, ticket.event_id' in message


class TicketCommandRepoImpl(ITicketCommandRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _model_to_entity(model: TicketModel) -> Ticket:
        return Ticket(
            id=model.id,
            user_id=model.user_id,
            event_id=model.event_id,
            ticket_type_id=model.ticket_type_id,
            quantity=model.quantity,
            total_amount=model.total_amount,
            payment_reference=model.payment_reference,
            payment_status=PaymentStatus(model.payment_status),
            purchase_date=model.purchase_date,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    @Logger.io
    async def has_active_ticket(self, *, user_id: int, event_id: int) -> bool:
        result = await self.session.execute(
            select(TicketModel.id)
            .where(
                TicketModel.user_id == user_id,
                TicketModel.event_id == event_id,
                TicketModel.payment_status.in_(ACTIVE_PAYMENT_STATUSES),
            )
            .limit(1)
        )
        return result.scalar_one_or_none() is not None

    @Logger.io
    async def create(self, *, ticket: Ticket) -> Ticket:
        model = TicketModel(
            user_id=ticket.user_id,
            event_id=ticket.event_id,
            ticket_type_id=ticket.ticket_type_id,
            quantity=ticket.quantity,
            total_amount=ticket.total_amount,
            payment_reference=ticket.payment_reference,
            payment_status=ticket.payment_status.value,
            purchase_date=ticket.purchase_date or datetime.now(timezone.utc),
            created_at=ticket.created_at or datetime.now(timezone.utc),
            updated_at=ticket.updated_at,
        )
        self.session.add(model)
        try:
            await self.session.flush()
        except IntegrityError as e:
            if _is_reference_conflict(e):
                raise ReferenceCollisionError(ticket.payment_reference) from e
            if _is_active_ticket_conflict(e):
                raise DuplicateTicketError(ticket.user_id, ticket.event_id) from e
            raise

        Logger.base.info(
            f'🎫 [TICKET] Inserted ticket {model.id} ({model.payment_status}) '
            f'for user {model.user_id} event {model.event_id}'
        )
        return self._model_to_entity(model)

    @Logger.io
    async def get_by_reference(self, *, reference: str) -> Optional[Ticket]:
        result = await self.session.execute(
            select(TicketModel).where(TicketModel.payment_reference == reference)
        )
        model = result.scalar_one_or_none()
        return self._model_to_entity(model) if model else None

    @Logger.io
    async def get_by_id(self, *, ticket_id: int) -> Optional[Ticket]:
        result = await self.session.execute(select(TicketModel).where(TicketModel.id == ticket_id))
        model = result.scalar_one_or_none()
        return self._model_to_entity(model) if model else None

    @Logger.io
    async def update_status(self, *, ticket_id: int, new_status: PaymentStatus) -> StatusChange:
        new_status = PaymentStatus(new_status)
        if new_status != PaymentStatus.PENDING:
            result = await self.session.execute(
                update(TicketModel)
                .where(
                    TicketModel.id == ticket_id,
                    TicketModel.payment_status == PaymentStatus.PENDING.value,
                )
                .values(payment_status=new_status.value, updated_at=datetime.now(timezone.utc))
                .returning(TicketModel)
                .execution_options(populate_existing=True)
            )
            updated = result.scalar_one_or_none()
            if updated is not None:
                return StatusChange(ticket=self._model_to_entity(updated), transitioned=True)

        # Nothing matched: missing, or already out of pending
        current = await self.get_by_id(ticket_id=ticket_id)
        if current is None:
            raise TicketNotFoundError(ticket_id)
        if current.payment_status == new_status:
            return StatusChange(ticket=current, transitioned=False)
        raise InvalidTransitionError(current.payment_status.value, new_status.value)

    @Logger.io
    async def list_by_user(self, *, user_id: int) -> List[Ticket]:
        result = await self.session.execute(
            select(TicketModel)
            .where(
                TicketModel.user_id == user_id,
                TicketModel.payment_status.in_(ACTIVE_PAYMENT_STATUSES),
            )
            .order_by(TicketModel.created_at.desc(), TicketModel.id.desc())
        )
        return [self._model_to_entity(model) for model in result.scalars().all()]
