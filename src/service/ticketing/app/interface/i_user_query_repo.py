from abc import ABC, abstractmethod
from typing import Optional

from src.service.ticketing.domain.entity.user_entity import UserEntity


class IUserQueryRepo(ABC):
    """User lookups consumed by the purchase flow (read only)"""

    @abstractmethod
    async def get_by_id(self, *, user_id: int) -> Optional[UserEntity]:
        pass

    @abstractmethod
    async def get_admin_account(self) -> Optional[UserEntity]:
        """The single user marked as platform fee recipient"""
        pass
