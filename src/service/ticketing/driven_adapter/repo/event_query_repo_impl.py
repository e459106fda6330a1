from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_event_query_repo import IEventQueryRepo
from src.service.ticketing.domain.entity.event_entity import Event
from src.service.ticketing.domain.enum.restriction import GenderRestriction
from src.service.ticketing.driven_adapter.model.event_model import EventModel


class EventQueryRepoImpl(IEventQueryRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @Logger.io
    async def get_by_id(self, *, event_id: int) -> Optional[Event]:
        result = await self.session.execute(select(EventModel).where(EventModel.id == event_id))
        model = result.scalar_one_or_none()
        if not model:
            return None

        return Event(
            id=model.id,
            owner_id=model.owner_id,
            title=model.title,
            description=model.description,
            price=model.price,
            is_free=model.is_free,
            gender_restriction=GenderRestriction(model.gender_restriction or 'none'),
            age_restriction=list(model.age_restriction or []),
            has_multiple_ticket_types=model.has_multiple_ticket_types,
        )
