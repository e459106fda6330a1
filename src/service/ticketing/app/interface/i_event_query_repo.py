from abc import ABC, abstractmethod
from typing import Optional

from src.service.ticketing.domain.entity.event_entity import Event


class IEventQueryRepo(ABC):
    @abstractmethod
    async def get_by_id(self, *, event_id: int) -> Optional[Event]:
        pass
