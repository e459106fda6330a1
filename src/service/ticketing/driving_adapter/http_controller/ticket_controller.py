from typing import List

from fastapi import APIRouter, Depends, status

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.command.create_test_ticket_use_case import CreateTestTicketUseCase
from src.service.ticketing.app.command.register_free_ticket_use_case import (
    RegisterFreeTicketUseCase,
)
from src.service.ticketing.app.query.list_user_tickets_use_case import ListUserTicketsUseCase
from src.service.ticketing.domain.entity.user_entity import UserEntity
from src.service.ticketing.driving_adapter.http_controller.auth.current_user import (
    get_current_user,
)
from src.service.ticketing.driving_adapter.http_controller.schema.ticket_schema import (
    FreeTicketRequest,
    SandboxTicketRequest,
    TicketResponse,
)


router = APIRouter()


@router.post('/tickets/free', status_code=status.HTTP_201_CREATED)
@Logger.io
async def register_free_ticket(
    request: FreeTicketRequest,
    current_user: UserEntity = Depends(get_current_user),
    use_case: RegisterFreeTicketUseCase = Depends(RegisterFreeTicketUseCase.depends),
) -> TicketResponse:
    ticket = await use_case.register_free_ticket(
        user_id=current_user.id,
        event_id=request.event_id,
        ticket_type_id=request.ticket_type_id,
    )
    return TicketResponse.from_entity(ticket)


@router.post('/test/create-ticket', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_test_ticket(
    request: SandboxTicketRequest,
    current_user: UserEntity = Depends(get_current_user),
    use_case: CreateTestTicketUseCase = Depends(CreateTestTicketUseCase.depends),
) -> TicketResponse:
    ticket = await use_case.create_test_ticket(
        user_id=current_user.id,
        event_id=request.event_id,
        amount=request.amount,
        ticket_type_id=request.ticket_type_id,
    )
    return TicketResponse.from_entity(ticket)


@router.get('/users/tickets', response_model=List[TicketResponse])
@Logger.io
async def list_my_tickets(
    current_user: UserEntity = Depends(get_current_user),
    use_case: ListUserTicketsUseCase = Depends(ListUserTicketsUseCase.depends),
) -> List[TicketResponse]:
    tickets = await use_case.list_user_tickets(user_id=current_user.id)
    return [TicketResponse.from_entity(ticket) for ticket in tickets]
