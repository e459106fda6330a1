"""
Paystack Gateway Implementation

REST adapter for the initialize/verify contract:
- POST /transaction/initialize
- GET  /transaction/verify/{reference}

Every transport failure, non-2xx response or ``status: false`` envelope is
raised as GatewayError so callers can apply their recovery policy.
"""

from typing import Any, Dict, Optional

import httpx
import orjson

from src.platform.config.core_setting import Settings
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_payment_gateway import (
    GatewayInitialization,
    GatewayVerification,
    IPaymentGateway,
)
from src.service.ticketing.domain.ticketing_errors import GatewayError


class PaystackGatewayImpl(IPaymentGateway):
    def __init__(
        self, *, config: Settings, transport: Optional[httpx.AsyncBaseTransport] = None
    ) -> None:
        self.config = config
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.config.PAYSTACK_BASE_URL,
            headers={
                'Authorization': f'Bearer {self.config.PAYSTACK_SECRET_KEY.get_secret_value()}',
                'Content-Type': 'application/json',
            },
            timeout=self.config.PAYSTACK_TIMEOUT,
            transport=self._transport,
        )

    async def _request(
        self, method: str, path: str, *, reference: str, json: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        try:
            async with self._client() as client:
                response = await client.request(method, path, json=json)
                response.raise_for_status()
                body = orjson.loads(response.content)
        except httpx.HTTPStatusError as e:
            raise GatewayError(
                f'Payment gateway returned HTTP {e.response.status_code}', reference=reference
            ) from e
        except httpx.HTTPError as e:
            raise GatewayError(f'Payment gateway unreachable: {e}', reference=reference) from e
        except orjson.JSONDecodeError as e:
            raise GatewayError('Payment gateway returned invalid JSON', reference=reference) from e

        if not isinstance(body, dict):
            raise GatewayError('Payment gateway returned an unexpected body', reference=reference)
        if not body.get('status'):
            raise GatewayError(
                body.get('message') or 'Payment gateway rejected the request', reference=reference
            )
        return body.get('data') or {}

    @Logger.io
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
        data = await self._request(
            'POST',
            '/transaction/initialize',
            reference=reference,
            json={
                'email': email,
                'amount': amount_minor,
                'currency': currency,
                'reference': reference,
                'callback_url': callback_url,
                'metadata': metadata,
            },
        )
        Logger.base.info(f'💳 [PAYSTACK] Initialized transaction {reference} ({amount_minor} {currency})')
        return GatewayInitialization(
            authorization_url=data.get('authorization_url', ''),
            reference=data.get('reference', reference),
            access_code=data.get('access_code'),
        )

    @Logger.io
    async def verify_transaction(self, *, reference: str) -> GatewayVerification:
        data = await self._request('GET', f'/transaction/verify/{reference}', reference=reference)
        verification = GatewayVerification(
            status=str(data.get('status', 'unknown')),
            reference=data.get('reference', reference),
            amount_minor=int(data.get('amount') or 0),
            currency=data.get('currency'),
            metadata=data.get('metadata') or {},
        )
        Logger.base.info(f'💳 [PAYSTACK] Verified {reference}: {verification.status}')
        return verification
