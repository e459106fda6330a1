"""Ticket payment status and its allowed transitions"""

from enum import StrEnum


class PaymentStatus(StrEnum):
    PENDING = 'pending'
    COMPLETED = 'completed'
    FAILED = 'failed'

    @property
    def is_terminal(self) -> bool:
        return self is not PaymentStatus.PENDING

    @property
    def is_active(self) -> bool:
        """Active tickets count towards the one-ticket-per-user-per-event rule."""
        return self is not PaymentStatus.FAILED

    def can_transition_to(self, new_status: 'PaymentStatus') -> bool:
        # Re-applying the current status is an idempotent no-op, not a transition
        if new_status == self:
            return True
        return new_status in _ALLOWED_TRANSITIONS[self]


_ALLOWED_TRANSITIONS: dict[PaymentStatus, frozenset[PaymentStatus]] = {
    PaymentStatus.PENDING: frozenset({PaymentStatus.COMPLETED, PaymentStatus.FAILED}),
    PaymentStatus.COMPLETED: frozenset(),
    PaymentStatus.FAILED: frozenset(),
}

ACTIVE_PAYMENT_STATUSES: tuple[str, ...] = (
    PaymentStatus.PENDING.value,
    PaymentStatus.COMPLETED.value,
)
