"""Platform fee arithmetic. Decimal only, never float."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional


DEFAULT_PLATFORM_FEE_RATE = Decimal('0.15')
MINOR_UNITS_PER_MAJOR = 100


def compute_platform_fee(ticket_amount: Decimal, rate: Decimal = DEFAULT_PLATFORM_FEE_RATE) -> Decimal:
    return Decimal(ticket_amount) * rate


def fee_for_completed_ticket(
    *, ticket_amount: Decimal, buyer_is_admin: bool, rate: Decimal = DEFAULT_PLATFORM_FEE_RATE
) -> Optional[Decimal]:
    """Fee to record for a completed ticket, or None when no fee applies.

    Tickets bought by the platform account itself never route a fee back to it.
    """
    if buyer_is_admin:
        return None
    return compute_platform_fee(ticket_amount, rate)


def to_minor_units(amount: Decimal) -> int:
    return int((Decimal(amount) * MINOR_UNITS_PER_MAJOR).to_integral_value(rounding=ROUND_HALF_UP))


def from_minor_units(amount_minor: int) -> Decimal:
    return Decimal(amount_minor) / MINOR_UNITS_PER_MAJOR
