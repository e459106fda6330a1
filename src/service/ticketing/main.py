"""
Ticket Ledger Service - Main Application
Handles ticket purchases, payment verification and the platform fee ledger.
"""

from contextlib import asynccontextmanager

import anyio
from fastapi import FastAPI

from src.platform.app_factory import create_app
from src.platform.config.di import container
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.database.orm_db_setting import create_db_and_tables
from src.platform.logging.loguru_io import Logger
from src.platform.observability.tracing import TracingConfig


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Manage application lifespan: startup and shutdown"""
    # Startup
    Logger.base.info('🚀 [Ticket Ledger] Starting up...')

    # Setup OpenTelemetry tracing
    tracing = TracingConfig(service_name='ticket-ledger')
    tracing.setup()
    Logger.base.info('📊 [Ticket Ledger] OpenTelemetry tracing configured')

    # Wire dependency injection for use cases and auth dependencies
    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Ticket Ledger] Dependency injection wired')

    database = container.database()
    tracing.instrument_sqlalchemy(engine=database.engine)
    await create_db_and_tables(database)

    # Ledger bootstrap: account first, then anything left pending by a previous run
    credit_use_case = container.credit_platform_fee_use_case()
    await credit_use_case.open_platform_account()
    await credit_use_case.retry_pending_credits()

    publisher = container.ticket_event_publisher()
    consumer = container.fee_ledger_consumer()

    async with anyio.create_task_group() as consumer_task:
        consumer_task.start_soon(consumer.run)
        Logger.base.info('📨 [Ticket Ledger] Fee ledger consumer started')
        Logger.base.info('✅ [Ticket Ledger] Startup complete')

        yield

        # Shutdown
        Logger.base.info('🛑 [Ticket Ledger] Shutting down...')
        # Closing the send side lets the consumer drain what is queued and return
        await publisher.close()

    await database.dispose()

    # Shutdown tracing (flush remaining spans)
    tracing.shutdown()
    Logger.base.info('📊 [Ticket Ledger] Tracing shutdown complete')

    # Unwire DI
    container.unwire()

    Logger.base.info('👋 [Ticket Ledger] Shutdown complete')


# Create FastAPI app
app = create_app(lifespan=lifespan)
