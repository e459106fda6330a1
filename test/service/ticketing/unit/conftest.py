"""
Unit test configuration for ticketing service.

Provides an in-memory unit of work whose repositories are AsyncMocks, so use
cases run without a database. Defaults describe an empty store: no active
ticket, no ticket for any reference, every reservation succeeds.
"""

from itertools import count
from typing import Any, Callable
from unittest.mock import AsyncMock

import attrs
import pytest

from src.platform.config.core_setting import Settings
from src.service.ticketing.app.interface.i_ticket_command_repo import StatusChange
from src.service.ticketing.app.service.ticket_completion_service import TicketCompletionService
from src.service.ticketing.domain.entity.fee_credit_entity import FeeCredit
from src.service.ticketing.domain.entity.ticket_entity import Ticket


class FakeUnitOfWork:
    def __init__(self) -> None:
        self._ticket_ids = count(100)
        self._credit_ids = count(500)

        self.tickets = AsyncMock()
        self.ticket_types = AsyncMock()
        self.events = AsyncMock()
        self.users = AsyncMock()
        self.fee_ledger = AsyncMock()
        self.commit = AsyncMock()

        self.tickets.has_active_ticket.return_value = False
        self.tickets.get_by_reference.return_value = None
        self.tickets.create.side_effect = self._create_ticket
        self.tickets.update_status.side_effect = self._update_status
        self.ticket_types.get_by_id.return_value = None
        self.ticket_types.reserve_unit.side_effect = lambda *, ticket_type_id, **_: ticket_type_id
        self.fee_ledger.record_pending_credit.side_effect = self._record_credit
        self.fee_ledger.get_platform_account.return_value = None

    async def __aenter__(self) -> 'FakeUnitOfWork':
        return self

    async def __aexit__(self, *args: Any) -> None:
        return None

    async def _create_ticket(self, *, ticket: Ticket) -> Ticket:
        return attrs.evolve(ticket, id=next(self._ticket_ids))

    async def _update_status(self, *, ticket_id: int, new_status: Any) -> StatusChange:
        current = self.tickets.get_by_reference.return_value
        assert current is not None and current.id == ticket_id
        return StatusChange(ticket=current.transition_to(new_status), transitioned=True)

    async def _record_credit(self, *, ticket_id: int, amount: Any) -> FeeCredit:
        return FeeCredit(id=next(self._credit_ids), ticket_id=ticket_id, amount=amount)


@pytest.fixture
def uow() -> FakeUnitOfWork:
    return FakeUnitOfWork()


@pytest.fixture
def uow_factory(uow: FakeUnitOfWork) -> Callable[[], FakeUnitOfWork]:
    return lambda: uow


@pytest.fixture
def mock_event_publisher() -> AsyncMock:
    publisher = AsyncMock()
    publisher.publish_ticket_completed = AsyncMock()
    return publisher


@pytest.fixture
def completion_service(
    mock_event_publisher: AsyncMock, config: Settings
) -> TicketCompletionService:
    return TicketCompletionService(event_publisher=mock_event_publisher, config=config)
