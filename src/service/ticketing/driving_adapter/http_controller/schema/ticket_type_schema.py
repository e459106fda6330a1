from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from src.service.ticketing.domain.entity.ticket_type_entity import TicketType


class TicketTypeCreateRequest(BaseModel):
    model_config = {
        'json_schema_extra': {
            'example': {'name': 'VIP', 'description': 'Front rows', 'price': '250.00', 'quantity': 50}
        },
    }

    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    price: Decimal = Field(ge=0)
    quantity: int = Field(ge=0)
    is_active: Optional[bool] = None


class TicketTypeResponse(BaseModel):
    id: int
    event_id: int
    name: str
    description: str
    price: Decimal
    quantity: int
    sold_count: int
    available: int
    is_active: bool
    created_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, ticket_type: TicketType) -> 'TicketTypeResponse':
        return cls(
            id=ticket_type.id or 0,
            event_id=ticket_type.event_id,
            name=ticket_type.name,
            description=ticket_type.description,
            price=ticket_type.price,
            quantity=ticket_type.quantity,
            sold_count=ticket_type.sold_count,
            available=ticket_type.available,
            is_active=ticket_type.is_active,
            created_at=ticket_type.created_at,
        )
