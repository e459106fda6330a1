from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.exception.exceptions import ForbiddenError
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.domain.entity.fee_credit_entity import PlatformAccount
from src.service.ticketing.domain.ticketing_errors import PlatformAccountNotFoundError


class GetPlatformBalanceUseCase:
    def __init__(self, *, uow_factory: UnitOfWorkFactory) -> None:
        self.uow_factory = uow_factory

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work.provider]),
    ) -> Self:
        return cls(uow_factory=uow_factory)

    @Logger.io
    async def get_platform_balance(self, *, user_id: int) -> PlatformAccount:
        async with self.uow_factory() as uow:
            user = await uow.users.get_by_id(user_id=user_id)
            if user is None or not user.is_admin:
                raise ForbiddenError('Only the platform admin can view the platform balance')
            account = await uow.fee_ledger.get_platform_account()
            if account is None:
                raise PlatformAccountNotFoundError()
            return account
