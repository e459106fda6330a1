from typing import List, Optional

from fastapi import APIRouter, Depends, status

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.command.create_ticket_type_use_case import CreateTicketTypeUseCase
from src.service.ticketing.app.query.list_ticket_types_use_case import ListTicketTypesUseCase
from src.service.ticketing.domain.entity.user_entity import UserEntity
from src.service.ticketing.driving_adapter.http_controller.auth.current_user import (
    get_current_user,
    get_optional_user,
)
from src.service.ticketing.driving_adapter.http_controller.schema.ticket_type_schema import (
    TicketTypeCreateRequest,
    TicketTypeResponse,
)


router = APIRouter()


@router.get('/{event_id}/ticket-types', response_model=List[TicketTypeResponse])
@Logger.io
async def list_ticket_types(
    event_id: int,
    current_user: Optional[UserEntity] = Depends(get_optional_user),
    use_case: ListTicketTypesUseCase = Depends(ListTicketTypesUseCase.depends),
) -> List[TicketTypeResponse]:
    ticket_types = await use_case.list_ticket_types(
        event_id=event_id, user_id=current_user.id if current_user else None
    )
    return [TicketTypeResponse.from_entity(ticket_type) for ticket_type in ticket_types]


@router.post('/{event_id}/ticket-types', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_ticket_type(
    event_id: int,
    request: TicketTypeCreateRequest,
    current_user: UserEntity = Depends(get_current_user),
    use_case: CreateTicketTypeUseCase = Depends(CreateTicketTypeUseCase.depends),
) -> TicketTypeResponse:
    ticket_type = await use_case.create_ticket_type(
        user_id=current_user.id,
        event_id=event_id,
        name=request.name,
        description=request.description,
        price=request.price,
        quantity=request.quantity,
        is_active=request.is_active,
    )
    return TicketTypeResponse.from_entity(ticket_type)
