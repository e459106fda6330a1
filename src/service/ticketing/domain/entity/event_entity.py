from decimal import Decimal
from typing import List, Optional

import attrs

from src.service.ticketing.domain.enum.restriction import GenderRestriction


@attrs.define
class Event:
    """Read-only view of an event, limited to what the purchase flow consumes."""

    id: int
    owner_id: int
    title: str
    price: Decimal = Decimal('0')
    is_free: bool = False
    gender_restriction: GenderRestriction = GenderRestriction.NONE
    age_restriction: List[str] = attrs.field(factory=list)
    has_multiple_ticket_types: bool = False
    description: Optional[str] = None

    @property
    def is_free_event(self) -> bool:
        return self.is_free or (self.price or Decimal('0')) <= 0

    def is_managed_by(self, *, user_id: Optional[int], is_admin: bool) -> bool:
        return is_admin or (user_id is not None and self.owner_id == user_id)
