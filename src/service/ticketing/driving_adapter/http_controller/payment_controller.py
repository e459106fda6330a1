from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, status
from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.command.initialize_payment_use_case import (
    InitializePaymentUseCase,
)
from src.service.ticketing.app.command.verify_payment_use_case import VerifyPaymentUseCase
from src.service.ticketing.domain.entity.user_entity import UserEntity
from src.service.ticketing.driving_adapter.http_controller.auth.current_user import (
    get_current_user,
    get_optional_user,
)
from src.service.ticketing.driving_adapter.http_controller.schema.ticket_schema import (
    InitializePaymentRequest,
    InitializePaymentResponse,
    TicketResponse,
    VerifyPaymentResponse,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)


@router.post('/initialize', status_code=status.HTTP_201_CREATED)
@Logger.io
async def initialize_payment(
    request: InitializePaymentRequest,
    current_user: UserEntity = Depends(get_current_user),
    use_case: InitializePaymentUseCase = Depends(InitializePaymentUseCase.depends),
) -> InitializePaymentResponse:
    with tracer.start_as_current_span('controller.initialize_payment') as span:
        span.set_attribute('event_id', request.event_id)
        span.set_attribute('user_id', current_user.id)

        result = await use_case.initialize_payment(
            user_id=current_user.id,
            event_id=request.event_id,
            ticket_type_id=request.ticket_type_id,
        )
        return InitializePaymentResponse(payment_url=result.payment_url, reference=result.reference)


@router.get('/verify/{reference}')
@Logger.io
async def verify_payment(
    reference: str,
    amount: Optional[Decimal] = None,
    current_user: Optional[UserEntity] = Depends(get_optional_user),
    use_case: VerifyPaymentUseCase = Depends(VerifyPaymentUseCase.depends),
) -> VerifyPaymentResponse:
    result = await use_case.verify_payment(
        reference=reference,
        amount=amount,
        user_id=current_user.id if current_user else None,
    )
    return VerifyPaymentResponse(
        success=result.success,
        already_processed=result.already_processed,
        test_mode=result.test_mode,
        gateway_status=result.gateway_status,
        ticket=TicketResponse.from_entity(result.ticket) if result.ticket else None,
    )
