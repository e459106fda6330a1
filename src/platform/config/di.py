"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from dependency_injector import containers, providers

from src.platform.config.core_setting import Settings
from src.platform.database.orm_db_setting import Database
from src.platform.database.unit_of_work import SqlAlchemyUnitOfWork
from src.service.ticketing.app.command.credit_platform_fee_use_case import (
    CreditPlatformFeeUseCase,
)
from src.service.ticketing.app.service.ticket_completion_service import TicketCompletionService
from src.service.ticketing.driven_adapter.message_queue.in_memory_ticket_event_publisher_impl import (
    InMemoryTicketEventPublisherImpl,
)
from src.service.ticketing.driven_adapter.payment.paystack_gateway_impl import (
    PaystackGatewayImpl,
)
from src.service.ticketing.driving_adapter.event_consumer.fee_ledger_consumer import (
    FeeLedgerConsumer,
)
from src.service.ticketing.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Database (engine + session maker built from config_service)
    database = providers.Singleton(Database, config=config_service)

    # Unit of Work: a fresh one per transaction; use cases receive the provider as a factory
    unit_of_work = providers.Factory(
        SqlAlchemyUnitOfWork, session_maker=database.provided.session_maker
    )

    # Auth service
    jwt_auth = providers.Singleton(JwtAuth, config=config_service)

    # External payment gateway
    payment_gateway = providers.Singleton(PaystackGatewayImpl, config=config_service)

    # In-process message stream: use cases -> fee ledger consumer
    ticket_event_publisher = providers.Singleton(InMemoryTicketEventPublisherImpl)

    ticket_completion_service = providers.Singleton(
        TicketCompletionService,
        event_publisher=ticket_event_publisher,
        config=config_service,
    )

    # Fee ledger (driven by the consumer, not by HTTP)
    credit_platform_fee_use_case = providers.Singleton(
        CreditPlatformFeeUseCase, uow_factory=unit_of_work.provider
    )
    fee_ledger_consumer = providers.Singleton(
        FeeLedgerConsumer,
        receive_stream=ticket_event_publisher.provided.receive_stream,
        credit_platform_fee_use_case=credit_platform_fee_use_case,
    )


container = Container()


def setup() -> None:
    container.config_service()


def cleanup() -> None:
    container.reset_singletons()
