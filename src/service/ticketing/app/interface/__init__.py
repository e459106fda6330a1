"""Application layer interfaces (Ports)"""

from src.service.ticketing.app.interface.i_event_query_repo import IEventQueryRepo
from src.service.ticketing.app.interface.i_fee_ledger_repo import IFeeLedgerRepo
from src.service.ticketing.app.interface.i_payment_gateway import (
    GatewayInitialization,
    GatewayVerification,
    IPaymentGateway,
)
from src.service.ticketing.app.interface.i_ticket_command_repo import (
    ITicketCommandRepo,
    StatusChange,
)
from src.service.ticketing.app.interface.i_ticket_event_publisher import ITicketEventPublisher
from src.service.ticketing.app.interface.i_ticket_type_command_repo import (
    ITicketTypeCommandRepo,
)
from src.service.ticketing.app.interface.i_user_query_repo import IUserQueryRepo

__all__ = [
    'GatewayInitialization',
    'GatewayVerification',
    'IEventQueryRepo',
    'IFeeLedgerRepo',
    'IPaymentGateway',
    'ITicketCommandRepo',
    'ITicketEventPublisher',
    'ITicketTypeCommandRepo',
    'IUserQueryRepo',
    'StatusChange',
]
