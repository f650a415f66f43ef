import uuid
from datetime import datetime, timedelta, timezone

import pytest

from wheelapi.core.exceptions import AccountNotFoundError, InsufficientBalanceError
from wheelapi.models.account import AccountRole
from wheelapi.models.points import PointsLedger
from wheelapi.repositories.spin_repository import SpinRepository
from wheelapi.schemas.account import Identity
from wheelapi.services.account_service import AccountService


@pytest.fixture
def account_service(db, test_settings):
    return AccountService(db, test_settings)


class TestAccountService:
    """계정/포인트 서비스 테스트"""

    def test_ensure_account_creates_once(self, db, account_service):
        identity = Identity(
            account_id="user-1",
            display_name="Ploy",
            avatar_url="https://example.com/p.png",
        )

        created = account_service.ensure_account(identity)
        again = account_service.ensure_account(identity)

        assert created.id == again.id == "user-1"
        assert created.balance == 0
        assert created.display_name == "Ploy"
        assert created.role == AccountRole.USER

    def test_get_profile_unknown(self, account_service):
        with pytest.raises(AccountNotFoundError):
            account_service.get_profile("ghost")

    def test_admin_adjust_credit_and_debit(self, db, account_service, make_account):
        # Given
        make_account("user-1", balance=10)

        # When
        credit = account_service.admin_adjust("user-1", 50, "Booth visit", admin_id="admin-1")
        debit = account_service.admin_adjust("user-1", -30, "Correction", admin_id="admin-1")

        # Then
        assert credit.balance_after == 60
        assert debit.balance_after == 30
        assert account_service.get_balance("user-1") == 30
        assert db.query(PointsLedger).filter_by(account_id="user-1").count() == 2

    def test_admin_adjust_cannot_go_negative(self, db, account_service, make_account):
        make_account("user-1", balance=10)

        with pytest.raises(InsufficientBalanceError):
            account_service.admin_adjust("user-1", -11, "Too much", admin_id="admin-1")

        assert account_service.get_balance("user-1") == 10
        assert db.query(PointsLedger).count() == 0

    def test_admin_adjust_unknown_account(self, account_service):
        with pytest.raises(AccountNotFoundError):
            account_service.admin_adjust("ghost", 10, "Bonus", admin_id="admin-1")

    def test_history_newest_first_with_limit(self, db, account_service, make_account):
        # Given
        make_account("user-1")
        repo = SpinRepository(db)
        base = datetime(2024, 10, 19, 12, 0, tzinfo=timezone.utc)
        for i in range(5):
            repo.append(
                record_id=str(uuid.uuid4()),
                account_id="user-1",
                prize_label=f"prize-{i}",
                reward_tag="",
                cost=20,
                claim_ticket_id=f"ticket-{i}",
                created_at=base + timedelta(minutes=i),
            )

        # When
        history = account_service.get_history("user-1", limit=3)

        # Then
        assert [r.prize_label for r in history.history] == ["prize-4", "prize-3", "prize-2"]
        assert history.total_count == 5

    def test_ledger_pagination(self, account_service, make_account):
        make_account("user-1", balance=0)
        for amount in (10, 20, 30):
            account_service.admin_adjust("user-1", amount, "Bonus", admin_id="admin-1")

        first = account_service.get_ledger("user-1", limit=2, offset=0)
        second = account_service.get_ledger("user-1", limit=2, offset=2)

        assert first.balance == 60
        assert first.total_count == 3
        assert first.has_next is True
        assert [e.delta_points for e in first.entries] == [30, 20]
        assert all(e.transaction_type == "CREDIT" for e in first.entries)
        assert second.has_next is False
        assert [e.delta_points for e in second.entries] == [10]
