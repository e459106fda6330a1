from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

import attrs

from src.platform.exception.exceptions import DomainError
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.domain.enum.payment_status import PaymentStatus
from src.service.ticketing.domain.ticketing_errors import InvalidTransitionError


@attrs.define
class Ticket:
    user_id: int
    event_id: int
    total_amount: Decimal
    payment_reference: str
    payment_status: PaymentStatus = PaymentStatus.PENDING
    quantity: int = 1
    ticket_type_id: Optional[int] = None
    id: Optional[int] = None
    purchase_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        user_id: int,
        event_id: int,
        total_amount: Decimal,
        payment_reference: str,
        payment_status: PaymentStatus,
        quantity: int = 1,
        ticket_type_id: Optional[int] = None,
    ) -> 'Ticket':
        if payment_status == PaymentStatus.FAILED:
            raise DomainError('A ticket cannot be created in failed status')
        if quantity < 1:
            raise DomainError('quantity must be at least 1')
        if total_amount < 0:
            raise DomainError('total_amount cannot be negative')
        if not payment_reference:
            raise DomainError('payment_reference is required')

        now = datetime.now(timezone.utc)
        return cls(
            user_id=user_id,
            event_id=event_id,
            ticket_type_id=ticket_type_id,
            quantity=quantity,
            total_amount=Decimal(total_amount),
            payment_reference=payment_reference,
            payment_status=PaymentStatus(payment_status),
            purchase_date=now,
            created_at=now,
            updated_at=None,
        )

    @property
    def is_completed(self) -> bool:
        return self.payment_status == PaymentStatus.COMPLETED

    @property
    def is_pending(self) -> bool:
        return self.payment_status == PaymentStatus.PENDING

    def validate_transition(self, new_status: PaymentStatus) -> None:
        """
        Raises:
            InvalidTransitionError: When leaving a terminal status
        """
        if not self.payment_status.can_transition_to(new_status):
            raise InvalidTransitionError(self.payment_status.value, PaymentStatus(new_status).value)

    def transition_to(self, new_status: PaymentStatus) -> 'Ticket':
        self.validate_transition(new_status)
        if new_status == self.payment_status:
            return self
        return attrs.evolve(
            self,
            payment_status=PaymentStatus(new_status),
            updated_at=datetime.now(timezone.utc),
        )
