from abc import ABC, abstractmethod
from decimal import Decimal
from typing import List, Optional

from src.service.ticketing.domain.entity.fee_credit_entity import FeeCredit, PlatformAccount


class IFeeLedgerRepo(ABC):
    """
    Platform fee ledger port.

    The ledger is an append-only log of fee credits (one per completed ticket)
    plus a single platform account whose balance caches the credited total.
    """

    @abstractmethod
    async def record_pending_credit(self, *, ticket_id: int, amount: Decimal) -> FeeCredit:
        """
        Append the fee credit for a ticket. Must run in the transaction that
        completes the ticket.

        Raises:
            IntegrityError: A credit already exists for the ticket
        """
        pass

    @abstractmethod
    async def get_credit_by_ticket(self, *, ticket_id: int) -> Optional[FeeCredit]:
        pass

    @abstractmethod
    async def mark_credited_and_apply(self, *, credit_id: int) -> Optional[FeeCredit]:
        """
        Flip a pending credit to credited and add its amount to the platform balance.

        Returns:
            The credited entry, or None when it was already credited

        Raises:
            PlatformAccountNotFoundError: No platform account exists to receive the fee
        """
        pass

    @abstractmethod
    async def list_pending(self) -> List[FeeCredit]:
        pass

    @abstractmethod
    async def get_platform_account(self) -> Optional[PlatformAccount]:
        pass

    @abstractmethod
    async def open_platform_account(self, *, user_id: int) -> PlatformAccount:
        """Return the platform account, creating it for ``user_id`` when none exists"""
        pass
