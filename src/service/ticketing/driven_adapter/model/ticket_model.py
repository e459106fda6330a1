from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Index, Integer, Numeric, String, text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from src.platform.database.orm_db_setting import Base


# One pending/completed ticket per (user, event); failed tickets do not count
_ACTIVE_STATUS_CLAUSE = text("payment_status IN ('pending', 'completed')")


class TicketModel(Base):
    __tablename__ = 'ticket'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey('user.id'), nullable=False, index=True)
    event_id: Mapped[int] = mapped_column(ForeignKey('event.id'), nullable=False, index=True)
    ticket_type_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey('ticket_type.id'), nullable=True
    )
    quantity: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    payment_reference: Mapped[str] = mapped_column(String(255), nullable=False)
    payment_status: Mapped[str] = mapped_column(String(20), default='pending', nullable=False)
    purchase_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index('uq_ticket_payment_reference', 'payment_reference', unique=True),
        Index(
            'uq_ticket_active_user_event',
            'user_id',
            'event_id',
            unique=True,
            postgresql_where=_ACTIVE_STATUS_CLAUSE,
            sqlite_where=_ACTIVE_STATUS_CLAUSE,
        ),
    )

    def __repr__(self):
        return (
            f'<TicketModel(id={self.id}, reference={self.payment_reference}, '
            f'status={self.payment_status})>'
        )
