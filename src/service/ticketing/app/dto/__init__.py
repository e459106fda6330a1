"""Application layer DTOs"""

from src.service.ticketing.app.dto.payment_result import PaymentInitialization, VerificationResult

__all__ = [
    'PaymentInitialization',
    'VerificationResult',
]
