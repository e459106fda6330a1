from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_ticket_type_command_repo import (
    ITicketTypeCommandRepo,
)
from src.service.ticketing.domain.entity.ticket_type_entity import TicketType
from src.service.ticketing.driven_adapter.model.ticket_type_model import TicketTypeModel


class TicketTypeCommandRepoImpl(ITicketTypeCommandRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _model_to_entity(model: TicketTypeModel) -> TicketType:
        return TicketType(
            id=model.id,
            event_id=model.event_id,
            name=model.name,
            description=model.description or '',
            price=model.price,
            quantity=model.quantity,
            sold_count=model.sold_count or 0,
            is_active=model.is_active,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    @Logger.io
    async def get_by_id(self, *, ticket_type_id: int) -> Optional[TicketType]:
        result = await self.session.execute(
            select(TicketTypeModel).where(TicketTypeModel.id == ticket_type_id)
        )
        model = result.scalar_one_or_none()
        return self._model_to_entity(model) if model else None

    @Logger.io
    async def list_by_event(self, *, event_id: int, active_only: bool = False) -> List[TicketType]:
        stmt = select(TicketTypeModel).where(TicketTypeModel.event_id == event_id)
        if active_only:
            stmt = stmt.where(TicketTypeModel.is_active.is_(True))
        result = await self.session.execute(stmt.order_by(TicketTypeModel.id))
        return [self._model_to_entity(model) for model in result.scalars().all()]

    @Logger.io
    async def create(self, *, ticket_type: TicketType) -> TicketType:
        model = TicketTypeModel(
            event_id=ticket_type.event_id,
            name=ticket_type.name,
            description=ticket_type.description,
            price=ticket_type.price,
            quantity=ticket_type.quantity,
            sold_count=0,
            is_active=ticket_type.is_active,
            created_at=ticket_type.created_at or datetime.now(timezone.utc),
        )
        self.session.add(model)
        await self.session.flush()
        return self._model_to_entity(model)

    @Logger.io
    async def reserve_unit(
        self, *, ticket_type_id: int, event_id: Optional[int] = None
    ) -> Optional[TicketType]:
        conditions = [
            TicketTypeModel.id == ticket_type_id,
            TicketTypeModel.is_active.is_(True),
            TicketTypeModel.sold_count < TicketTypeModel.quantity,
        ]
        if event_id is not None:
            conditions.append(TicketTypeModel.event_id == event_id)

        # Check and increment in one statement; concurrent callers serialise on the row
        result = await self.session.execute(
            update(TicketTypeModel)
            .where(*conditions)
            .values(
                sold_count=TicketTypeModel.sold_count + 1,
                updated_at=datetime.now(timezone.utc),
            )
            .returning(TicketTypeModel)
            .execution_options(populate_existing=True)
        )
        model = result.scalar_one_or_none()
        if model is None:
            Logger.base.info(f'🚫 [INVENTORY] Ticket type {ticket_type_id} has no unit to reserve')
            return None
        return self._model_to_entity(model)

    @Logger.io
    async def release_unit(self, *, ticket_type_id: int) -> Optional[TicketType]:
        result = await self.session.execute(
            update(TicketTypeModel)
            .where(TicketTypeModel.id == ticket_type_id, TicketTypeModel.sold_count > 0)
            .values(
                sold_count=TicketTypeModel.sold_count - 1,
                updated_at=datetime.now(timezone.utc),
            )
            .returning(TicketTypeModel)
            .execution_options(populate_existing=True)
        )
        model = result.scalar_one_or_none()
        return self._model_to_entity(model) if model else None
