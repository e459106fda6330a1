from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from src.service.ticketing.domain.entity.ticket_entity import Ticket


class TicketResponse(BaseModel):
    id: int
    user_id: int
    event_id: int
    ticket_type_id: Optional[int] = None
    quantity: int
    total_amount: Decimal
    payment_reference: str
    payment_status: str
    purchase_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, ticket: Ticket) -> 'TicketResponse':
        return cls(
            id=ticket.id or 0,
            user_id=ticket.user_id,
            event_id=ticket.event_id,
            ticket_type_id=ticket.ticket_type_id,
            quantity=ticket.quantity,
            total_amount=ticket.total_amount,
            payment_reference=ticket.payment_reference,
            payment_status=ticket.payment_status.value,
            purchase_date=ticket.purchase_date,
            created_at=ticket.created_at,
            updated_at=ticket.updated_at,
        )


class InitializePaymentRequest(BaseModel):
    model_config = {
        'json_schema_extra': {'example': {'event_id': 5, 'ticket_type_id': 2}},
    }

    event_id: int
    ticket_type_id: Optional[int] = None


class InitializePaymentResponse(BaseModel):
    payment_url: str
    reference: str


class VerifyPaymentResponse(BaseModel):
    success: bool
    already_processed: bool = False
    test_mode: bool = False
    gateway_status: Optional[str] = None
    ticket: Optional[TicketResponse] = None


class FreeTicketRequest(BaseModel):
    event_id: int
    ticket_type_id: Optional[int] = None


class SandboxTicketRequest(BaseModel):
    event_id: int
    amount: Optional[Decimal] = Field(default=None, ge=0)
    ticket_type_id: Optional[int] = None
