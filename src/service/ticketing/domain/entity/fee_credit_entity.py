from datetime import datetime
from decimal import Decimal
from enum import StrEnum
from typing import Optional

import attrs


class FeeCreditStatus(StrEnum):
    PENDING = 'pending'
    CREDITED = 'credited'


@attrs.define
class FeeCredit:
    """One platform-fee entry per completed ticket in the append-only ledger."""

    ticket_id: int
    amount: Decimal
    status: FeeCreditStatus = FeeCreditStatus.PENDING
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    credited_at: Optional[datetime] = None


@attrs.define
class PlatformAccount:
    user_id: int
    balance: Decimal = Decimal('0')
    id: Optional[int] = None
    updated_at: Optional[datetime] = None
