from fastapi import APIRouter, Depends

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.query.get_platform_balance_use_case import (
    GetPlatformBalanceUseCase,
)
from src.service.ticketing.domain.entity.user_entity import UserEntity
from src.service.ticketing.driving_adapter.http_controller.auth.current_user import (
    get_current_user,
)
from src.service.ticketing.driving_adapter.http_controller.schema.platform_schema import (
    PlatformBalanceResponse,
)


router = APIRouter()


@router.get('/platform-balance')
@Logger.io
async def get_platform_balance(
    current_user: UserEntity = Depends(get_current_user),
    use_case: GetPlatformBalanceUseCase = Depends(GetPlatformBalanceUseCase.depends),
) -> PlatformBalanceResponse:
    account = await use_case.get_platform_balance(user_id=current_user.id)
    return PlatformBalanceResponse(
        user_id=account.user_id, balance=account.balance, updated_at=account.updated_at
    )
