"""Ticketing Domain Value Objects"""

from src.service.ticketing.domain.value_object.payment_reference import PaymentReference

__all__ = ['PaymentReference']
