"""
Database Models

Import all models here to ensure they are registered with SQLAlchemy
"""

from src.service.ticketing.driven_adapter.model.event_model import EventModel
from src.service.ticketing.driven_adapter.model.fee_ledger_model import (
    FeeCreditModel,
    PlatformAccountModel,
)
from src.service.ticketing.driven_adapter.model.ticket_model import TicketModel
from src.service.ticketing.driven_adapter.model.ticket_type_model import TicketTypeModel
from src.service.ticketing.driven_adapter.model.user_model import UserModel

__all__ = [
    'EventModel',
    'FeeCreditModel',
    'PlatformAccountModel',
    'TicketModel',
    'TicketTypeModel',
    'UserModel',
]
