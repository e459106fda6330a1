"""
Payment Gateway Interface

Opaque external service with an initialize/verify contract.
Amounts cross this boundary in minor units (cents).
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import attrs


@attrs.define(frozen=True)
class GatewayInitialization:
    authorization_url: str
    reference: str
    access_code: Optional[str] = None


@attrs.define(frozen=True)
class GatewayVerification:
    status: str
    reference: str
    amount_minor: int = 0
    currency: Optional[str] = None
    metadata: Dict[str, Any] = attrs.field(factory=dict)

    @property
    def is_success(self) -> bool:
        return self.status == 'success'


class IPaymentGateway(ABC):
    @abstractmethod
    async def initialize_transaction(
        self,
        *,
        email: str,
        amount_minor: int,
        currency: str,
        reference: str,
        callback_url: str,
        metadata: Dict[str, Any],
    ) -> GatewayInitialization:
        """
        Raises:
            GatewayError: Transport failure or the gateway rejected the request
        """
        pass

    @abstractmethod
    async def verify_transaction(self, *, reference: str) -> GatewayVerification:
        """
        Raises:
            GatewayError: Transport failure or the gateway rejected the request
        """
        pass
