"""
HTTP integration fixtures

The app runs under TestClient with a test lifespan (no tracing exporter, no
background consumer); the container points at a per-test SQLite file and a
stubbed payment gateway. Seeding goes through the client's portal so the
engine is only ever used from the app's event loop.
"""

from collections.abc import AsyncIterator, Iterator
from contextlib import asynccontextmanager
from functools import partial
from pathlib import Path
from typing import Any, Callable
from unittest.mock import AsyncMock

from dependency_injector import providers
from fastapi import FastAPI
from fastapi.testclient import TestClient
import pytest

from src.platform.app_factory import create_app
from src.platform.config.core_setting import settings
from src.platform.config.di import container
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.database.orm_db_setting import Database, create_db_and_tables
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_payment_gateway import (
    GatewayInitialization,
    GatewayVerification,
)
from src.service.ticketing.domain.entity.user_entity import UserEntity
from src.service.ticketing.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


@asynccontextmanager
async def lifespan_for_tests(app: FastAPI) -> AsyncIterator[None]:
    Logger.base.info('🧪 [Test App] Starting up...')
    container.wire(modules=WIRE_MODULES)
    await create_db_and_tables(container.database())
    Logger.base.info('✅ [Test App] Startup complete (no tracing, no consumer)')

    yield

    await container.database().dispose()
    container.unwire()
    Logger.base.info('👋 [Test App] Shutdown complete')


@pytest.fixture
def stub_gateway() -> AsyncMock:
    gateway = AsyncMock()

    async def initialize(*, reference: str, **kwargs: Any) -> GatewayInitialization:
        return GatewayInitialization(
            authorization_url=f'https://checkout.paystack.test/{reference}', reference=reference
        )

    async def verify(*, reference: str) -> GatewayVerification:
        return GatewayVerification(status='success', reference=reference, amount_minor=10000)

    gateway.initialize_transaction.side_effect = initialize
    gateway.verify_transaction.side_effect = verify
    return gateway


@pytest.fixture
def client(tmp_path: Path, stub_gateway: AsyncMock) -> Iterator[TestClient]:
    database = Database(database_url=f'sqlite+aiosqlite:///{tmp_path / "api.db"}')
    container.database.override(providers.Object(database))
    container.payment_gateway.override(providers.Object(stub_gateway))

    app = create_app(lifespan=lifespan_for_tests, title_suffix=' (Test)', instrument=False)
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client

    container.database.reset_override()
    container.payment_gateway.reset_override()
    container.reset_singletons()


class PortalSeeder:
    """Runs the async Seeder on the app's event loop."""

    def __init__(self, client: TestClient, seeder: Any) -> None:
        self._client = client
        self._seeder = seeder

    def __getattr__(self, name: str) -> Callable[..., Any]:
        method = getattr(self._seeder, name)
        return lambda **kwargs: self._client.portal.call(partial(method, **kwargs))


@pytest.fixture
def seed(client: TestClient, seeder_factory) -> PortalSeeder:
    return PortalSeeder(client, seeder_factory(container.database()))


@pytest.fixture
def login(client: TestClient) -> Callable[..., None]:
    jwt_auth = JwtAuth(config=settings)

    def _login(*, user_id: int, email: str, is_admin: bool = False) -> None:
        token = jwt_auth.create_jwt_token(
            UserEntity(id=user_id, email=email, name=email.split('@')[0], is_admin=is_admin)
        )
        client.cookies.set(settings.AUTH_COOKIE_NAME, token)

    return _login
