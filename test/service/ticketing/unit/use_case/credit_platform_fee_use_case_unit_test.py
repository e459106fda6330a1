"""
Unit tests for CreditPlatformFeeUseCase

The use case runs outside any purchase transaction: a missing platform
account surfaces as FeeCreditFailure and leaves the credit pending.
"""

from decimal import Decimal

import pytest

from src.platform.exception.exceptions import ForbiddenError
from src.service.ticketing.app.command.credit_platform_fee_use_case import (
    CreditPlatformFeeUseCase,
)
from src.service.ticketing.app.query.get_platform_balance_use_case import (
    GetPlatformBalanceUseCase,
)
from src.service.ticketing.domain.entity.fee_credit_entity import (
    FeeCredit,
    FeeCreditStatus,
    PlatformAccount,
)
from src.service.ticketing.domain.entity.user_entity import UserEntity
from src.service.ticketing.domain.ticketing_errors import (
    FeeCreditFailure,
    PlatformAccountNotFoundError,
)


@pytest.fixture
def use_case(uow_factory) -> CreditPlatformFeeUseCase:
    return CreditPlatformFeeUseCase(uow_factory=uow_factory)


def _credit(credit_id: int, ticket_id: int, status: FeeCreditStatus) -> FeeCredit:
    return FeeCredit(id=credit_id, ticket_id=ticket_id, amount=Decimal('15'), status=status)


@pytest.mark.unit
class TestCreditFee:
    @pytest.mark.asyncio
    async def test_pending_credit_is_applied(self, use_case, uow) -> None:
        # Arrange
        uow.fee_ledger.mark_credited_and_apply.return_value = _credit(
            1, 41, FeeCreditStatus.CREDITED
        )

        # Act
        credited = await use_case.credit_fee(fee_credit_id=1, ticket_id=41)

        # Assert
        uow.fee_ledger.mark_credited_and_apply.assert_awaited_once_with(credit_id=1)
        uow.commit.assert_awaited_once()
        assert credited is not None
        assert credited.status == FeeCreditStatus.CREDITED

    @pytest.mark.asyncio
    async def test_already_applied_credit_is_noop(self, use_case, uow) -> None:
        uow.fee_ledger.mark_credited_and_apply.return_value = None

        assert await use_case.credit_fee(fee_credit_id=1, ticket_id=41) is None

    @pytest.mark.asyncio
    async def test_missing_platform_account_raises_fee_credit_failure(
        self, use_case, uow
    ) -> None:
        # Arrange
        uow.fee_ledger.mark_credited_and_apply.side_effect = PlatformAccountNotFoundError()

        # Act & Assert
        with pytest.raises(FeeCreditFailure) as exc_info:
            await use_case.credit_fee(fee_credit_id=1, ticket_id=41)

        assert exc_info.value.ticket_id == 41
        assert 'No admin account found to credit platform fee' in exc_info.value.message
        uow.commit.assert_not_awaited()


@pytest.mark.unit
class TestRetryPendingCredits:
    @pytest.mark.asyncio
    async def test_applies_every_pending_credit(self, use_case, uow) -> None:
        # Arrange
        pending = [_credit(1, 41, FeeCreditStatus.PENDING), _credit(2, 42, FeeCreditStatus.PENDING)]
        uow.fee_ledger.list_pending.return_value = pending
        uow.fee_ledger.mark_credited_and_apply.side_effect = [
            _credit(1, 41, FeeCreditStatus.CREDITED),
            _credit(2, 42, FeeCreditStatus.CREDITED),
        ]

        # Act
        applied = await use_case.retry_pending_credits()

        # Assert
        assert applied == 2

    @pytest.mark.asyncio
    async def test_stops_when_no_platform_account(self, use_case, uow) -> None:
        uow.fee_ledger.list_pending.return_value = [
            _credit(1, 41, FeeCreditStatus.PENDING),
            _credit(2, 42, FeeCreditStatus.PENDING),
        ]
        uow.fee_ledger.mark_credited_and_apply.side_effect = PlatformAccountNotFoundError()

        applied = await use_case.retry_pending_credits()

        assert applied == 0
        assert uow.fee_ledger.mark_credited_and_apply.await_count == 1


@pytest.mark.unit
class TestOpenPlatformAccount:
    @pytest.mark.asyncio
    async def test_opens_account_for_admin(self, use_case, uow) -> None:
        uow.users.get_admin_account.return_value = UserEntity(id=1, is_admin=True)
        uow.fee_ledger.open_platform_account.return_value = PlatformAccount(id=1, user_id=1)

        account = await use_case.open_platform_account()

        uow.fee_ledger.open_platform_account.assert_awaited_once_with(user_id=1)
        assert account is not None
        assert account.balance == Decimal('0')

    @pytest.mark.asyncio
    async def test_no_admin_no_account(self, use_case, uow) -> None:
        uow.users.get_admin_account.return_value = None

        assert await use_case.open_platform_account() is None
        uow.fee_ledger.open_platform_account.assert_not_awaited()


@pytest.mark.unit
class TestGetPlatformBalance:
    @pytest.fixture
    def balance_use_case(self, uow_factory) -> GetPlatformBalanceUseCase:
        return GetPlatformBalanceUseCase(uow_factory=uow_factory)

    @pytest.mark.asyncio
    async def test_admin_reads_balance(self, balance_use_case, uow) -> None:
        uow.users.get_by_id.return_value = UserEntity(id=1, is_admin=True)
        uow.fee_ledger.get_platform_account.return_value = PlatformAccount(
            id=1, user_id=1, balance=Decimal('60.0735')
        )

        account = await balance_use_case.get_platform_balance(user_id=1)

        assert account.balance == Decimal('60.0735')

    @pytest.mark.asyncio
    async def test_non_admin_is_forbidden(self, balance_use_case, uow) -> None:
        uow.users.get_by_id.return_value = UserEntity(id=12)

        with pytest.raises(ForbiddenError):
            await balance_use_case.get_platform_balance(user_id=12)

    @pytest.mark.asyncio
    async def test_missing_account(self, balance_use_case, uow) -> None:
        uow.users.get_by_id.return_value = UserEntity(id=1, is_admin=True)

        with pytest.raises(PlatformAccountNotFoundError):
            await balance_use_case.get_platform_balance(user_id=1)
