"""Ticketing Domain Enums"""

from src.service.ticketing.domain.enum.payment_status import (
    ACTIVE_PAYMENT_STATUSES,
    PaymentStatus,
)
from src.service.ticketing.domain.enum.restriction import AgeBucket, Gender, GenderRestriction

__all__ = [
    'ACTIVE_PAYMENT_STATUSES',
    'AgeBucket',
    'Gender',
    'GenderRestriction',
    'PaymentStatus',
]
