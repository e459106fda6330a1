from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

import attrs

from src.platform.exception.exceptions import DomainError
from src.platform.logging.loguru_io import Logger


@attrs.define
class TicketType:
    event_id: int
    name: str
    price: Decimal
    quantity: int
    description: str = ''
    sold_count: int = 0
    is_active: bool = True
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        event_id: int,
        name: str,
        price: Decimal,
        quantity: int,
        description: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> 'TicketType':
        if not name or not name.strip():
            raise DomainError('Ticket type name is required')
        if price < 0:
            raise DomainError('Ticket type price cannot be negative')
        if quantity < 0:
            raise DomainError('Ticket type quantity cannot be negative')

        return cls(
            event_id=event_id,
            name=name.strip(),
            description=description or '',
            price=Decimal(price),
            quantity=quantity,
            sold_count=0,  # never taken from caller input
            is_active=True if is_active is None else is_active,
            created_at=datetime.now(timezone.utc),
        )

    @property
    def available(self) -> int:
        return self.quantity - (self.sold_count or 0)

    def is_available(self) -> bool:
        return self.available > 0
