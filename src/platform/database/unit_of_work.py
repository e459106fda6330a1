"""
Unit of Work Pattern - one database session and transaction shared by repositories

Architecture:
- UoW owns the session lifecycle and commit/rollback
- Repositories receive the UoW session, so writes from several repositories
  (reserve a ticket-type unit, insert the ticket, append the fee credit)
  commit or roll back together
- Leaving the context without commit() rolls back
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING, Any, Callable

from sqlalchemy.ext.asyncio import AsyncSession


if TYPE_CHECKING:
    from src.service.ticketing.app.interface.i_event_query_repo import IEventQueryRepo
    from src.service.ticketing.app.interface.i_fee_ledger_repo import IFeeLedgerRepo
    from src.service.ticketing.app.interface.i_ticket_command_repo import ITicketCommandRepo
    from src.service.ticketing.app.interface.i_ticket_type_command_repo import (
        ITicketTypeCommandRepo,
    )
    from src.service.ticketing.app.interface.i_user_query_repo import IUserQueryRepo


class AbstractUnitOfWork(abc.ABC):
    """
    Abstract Unit of Work for the ticketing service

    Usage:
        async with uow_factory() as uow:
            await uow.ticket_types.reserve_unit(ticket_type_id=...)
            ticket = await uow.tickets.create(ticket=...)
            await uow.commit()
    """

    tickets: ITicketCommandRepo
    ticket_types: ITicketTypeCommandRepo
    events: IEventQueryRepo
    users: IUserQueryRepo
    fee_ledger: IFeeLedgerRepo

    async def __aenter__(self) -> AbstractUnitOfWork:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.rollback()

    async def commit(self) -> None:
        await self._commit()

    @abc.abstractmethod
    async def _commit(self) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    async def rollback(self) -> None:
        raise NotImplementedError


class SqlAlchemyUnitOfWork(AbstractUnitOfWork):
    """SQLAlchemy implementation of Unit of Work"""

    def __init__(self, session_maker: Callable[[], AsyncSession]) -> None:
        self._session_maker = session_maker

    async def __aenter__(self) -> SqlAlchemyUnitOfWork:
        from src.service.ticketing.driven_adapter.repo.event_query_repo_impl import (
            EventQueryRepoImpl,
        )
        from src.service.ticketing.driven_adapter.repo.fee_ledger_repo_impl import (
            FeeLedgerRepoImpl,
        )
        from src.service.ticketing.driven_adapter.repo.ticket_command_repo_impl import (
            TicketCommandRepoImpl,
        )
        from src.service.ticketing.driven_adapter.repo.ticket_type_command_repo_impl import (
            TicketTypeCommandRepoImpl,
        )
        from src.service.ticketing.driven_adapter.repo.user_query_repo_impl import (
            UserQueryRepoImpl,
        )

        self.session = self._session_maker()
        self.tickets = TicketCommandRepoImpl(session=self.session)
        self.ticket_types = TicketTypeCommandRepoImpl(session=self.session)
        self.events = EventQueryRepoImpl(session=self.session)
        self.users = UserQueryRepoImpl(session=self.session)
        self.fee_ledger = FeeLedgerRepoImpl(session=self.session)

        await super().__aenter__()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await super().__aexit__(*args)
        await self.session.close()

    async def _commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()


UnitOfWorkFactory = Callable[[], AbstractUnitOfWork]
