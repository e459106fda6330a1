"""
Integration test configuration for ticketing service.

Each test gets its own SQLite file (aiosqlite) with the full schema, so the
unique indexes and conditional updates run against a real database engine.
A file is used instead of :memory: so concurrent sessions share one database.
"""

from decimal import Decimal
from pathlib import Path
from typing import AsyncIterator, Callable, List, Optional

from sqlalchemy import func, select
import pytest

from src.platform.database.orm_db_setting import Database
from src.platform.database.unit_of_work import SqlAlchemyUnitOfWork
from src.service.ticketing.driven_adapter.model import (
    EventModel,
    FeeCreditModel,
    PlatformAccountModel,
    TicketModel,
    TicketTypeModel,
    UserModel,
)


@pytest.fixture
async def database(tmp_path: Path) -> AsyncIterator[Database]:
    db = Database(database_url=f'sqlite+aiosqlite:///{tmp_path / "ticket_ledger.db"}')
    await db.create_tables()
    yield db
    await db.dispose()


@pytest.fixture
def uow_factory(database: Database) -> Callable[[], SqlAlchemyUnitOfWork]:
    return lambda: SqlAlchemyUnitOfWork(session_maker=database.session_maker)


class Seeder:
    """Inserts the rows owned by other services (users, events) plus inventory."""

    def __init__(self, database: Database) -> None:
        self.database = database

    async def user(
        self,
        *,
        email: str,
        is_admin: bool = False,
        gender: Optional[str] = None,
    ) -> int:
        async with self.database.session() as session:
            model = UserModel(email=email, name=email.split('@')[0], gender=gender, is_admin=is_admin)
            session.add(model)
            await session.commit()
            return model.id

    async def event(
        self,
        *,
        owner_id: int,
        price: Decimal = Decimal('100'),
        title: str = 'Jazz Night',
        is_free: bool = False,
    ) -> int:
        async with self.database.session() as session:
            model = EventModel(
                owner_id=owner_id,
                title=title,
                price=price,
                is_free=is_free,
                gender_restriction='none',
                age_restriction=[],
            )
            session.add(model)
            await session.commit()
            return model.id

    async def ticket_type(
        self, *, event_id: int, price: Decimal, quantity: int, name: str = 'General'
    ) -> int:
        async with self.database.session() as session:
            model = TicketTypeModel(
                event_id=event_id, name=name, price=price, quantity=quantity, sold_count=0
            )
            session.add(model)
            await session.commit()
            return model.id

    async def platform_account(self, *, user_id: int) -> int:
        async with self.database.session() as session:
            model = PlatformAccountModel(user_id=user_id, balance=Decimal('0'))
            session.add(model)
            await session.commit()
            return model.id

    async def balance(self) -> Decimal:
        async with self.database.session() as session:
            return (
                await session.execute(select(PlatformAccountModel.balance).limit(1))
            ).scalar_one()

    async def sold_count(self, *, ticket_type_id: int) -> int:
        async with self.database.session() as session:
            return (
                await session.execute(
                    select(TicketTypeModel.sold_count).where(TicketTypeModel.id == ticket_type_id)
                )
            ).scalar_one()

    async def ticket_statuses(self, *, event_id: int) -> List[str]:
        async with self.database.session() as session:
            result = await session.execute(
                select(TicketModel.payment_status)
                .where(TicketModel.event_id == event_id)
                .order_by(TicketModel.id)
            )
            return list(result.scalars().all())

    async def fee_credit_count(self) -> int:
        async with self.database.session() as session:
            return (await session.execute(select(func.count(FeeCreditModel.id)))).scalar_one()


@pytest.fixture
def seeder(database: Database) -> Seeder:
    return Seeder(database)


@pytest.fixture
def seeder_factory() -> Callable[[Database], Seeder]:
    return Seeder
