import re
import threading
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from wheelapi.core.exceptions import (
    AccountNotFoundError,
    InsufficientBalanceError,
    InvalidInputError,
    PersistenceError,
)
from wheelapi.core.prizes import DEFAULT_PRIZES, PrizeDefinition
from wheelapi.jobs.spin_jobs import ReconcileSpinDebitsJob
from wheelapi.models.points import PointsLedger
from wheelapi.models.spin import SpinRecord
from wheelapi.repositories.account_repository import AccountRepository
from wheelapi.services.spin_service import SpinService, generate_ticket_id

TICKET_PATTERN = re.compile(r"^[0-9a-z]+-[0-9a-z]{6}$")


@pytest.fixture
def spin_service(db, test_settings):
    return SpinService(db, test_settings, random_source=lambda: 0.0)


class TestSpinService:
    """SpinService 테스트"""

    def test_spin_debits_and_records(self, db, spin_service, make_account):
        # Given
        make_account("user-1", balance=100)

        # When
        result = spin_service.spin("user-1")

        # Then
        assert result.prize_index == 0
        assert result.balance_after == 80
        assert result.record.prize_label == DEFAULT_PRIZES[0].label
        assert result.record.reward_tag == DEFAULT_PRIZES[0].reward_tag
        assert result.record.cost == 20
        assert result.record.claimed is False
        assert TICKET_PATTERN.match(result.record.claim_ticket_id)

        assert AccountRepository(db).get_balance("user-1") == 80
        ledger = db.query(PointsLedger).filter_by(account_id="user-1").one()
        assert ledger.delta_points == -20
        assert ledger.balance_after == 80
        assert ledger.ref_id == f"spin_debit_{result.record.claim_ticket_id}"
        assert db.query(SpinRecord).count() == 1

    def test_exact_balance_can_spin(self, db, spin_service, make_account):
        make_account("user-1", balance=20)

        result = spin_service.spin("user-1")

        assert result.balance_after == 0

    def test_insufficient_balance_mutates_nothing(self, db, spin_service, make_account):
        # Given
        make_account("user-1", balance=10)

        # When
        with pytest.raises(InsufficientBalanceError) as exc_info:
            spin_service.spin("user-1")

        # Then
        assert exc_info.value.status_code == 400
        assert exc_info.value.details == {"required": 20, "available": 10}
        assert AccountRepository(db).get_balance("user-1") == 10
        assert db.query(SpinRecord).count() == 0
        assert db.query(PointsLedger).count() == 0

    def test_unknown_account(self, spin_service):
        with pytest.raises(AccountNotFoundError):
            spin_service.spin("ghost")

    @pytest.mark.parametrize("cost", [0, -5, True])
    def test_non_positive_cost_rejected(self, spin_service, make_account, cost):
        make_account("user-1", balance=100)

        with pytest.raises(InvalidInputError):
            spin_service.spin("user-1", cost=cost)

    def test_custom_cost_and_draw(self, db, test_settings, make_account):
        make_account("user-1", balance=50)
        prizes = [PrizeDefinition("A", 1.0, "a"), PrizeDefinition("B", 9.0, "b")]
        service = SpinService(db, test_settings, prizes=prizes, random_source=lambda: 0.5)

        result = service.spin("user-1", cost=5)

        assert result.prize_index == 1
        assert result.record.prize_label == "B"
        assert result.balance_after == 45

    def test_record_failure_keeps_debit_and_reconcile_refunds(
        self, db, spin_service, make_account
    ):
        """기록 저장 실패 시 PersistenceError, 이후 reconcile 작업이 환불"""
        # Given
        make_account("user-1", balance=100)

        # When
        with patch.object(
            spin_service.spin_repo,
            "append",
            side_effect=OperationalError("INSERT", {}, Exception("disk full")),
        ):
            with pytest.raises(PersistenceError) as exc_info:
                spin_service.spin("user-1")

        # Then
        assert exc_info.value.status_code == 503
        assert exc_info.value.details["balance_debited"] is True
        assert AccountRepository(db).get_balance("user-1") == 80
        assert db.query(SpinRecord).count() == 0

        first = ReconcileSpinDebitsJob(db, min_age_seconds=0).run()
        assert first.migrated == 1
        assert AccountRepository(db).get_balance("user-1") == 100

        second = ReconcileSpinDebitsJob(db, min_age_seconds=0).run()
        assert second.migrated == 0
        assert second.skipped == 1
        assert AccountRepository(db).get_balance("user-1") == 100

    def test_get_prize_table(self, spin_service):
        table = spin_service.get_prize_table()

        assert table.spin_cost == 20
        assert [p.label for p in table.prizes] == [p.label for p in DEFAULT_PRIZES]
        assert sum(p.probability for p in table.prizes) == pytest.approx(1.0)


class TestConcurrentSpins:
    """동시 스핀 테스트"""

    def test_only_one_spin_succeeds_when_balance_covers_one(
        self, session_factory, test_settings, make_account
    ):
        # Given: 잔액 25, 비용 20
        make_account("user-1", balance=25)
        barrier = threading.Barrier(2)
        outcomes = []
        lock = threading.Lock()

        def worker():
            session = session_factory()
            try:
                service = SpinService(session, test_settings)
                barrier.wait()
                try:
                    service.spin("user-1")
                    outcome = "ok"
                except InsufficientBalanceError:
                    outcome = "insufficient"
                with lock:
                    outcomes.append(outcome)
            finally:
                session.close()

        # When
        threads = [threading.Thread(target=worker) for _ in range(2)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        # Then
        assert sorted(outcomes) == ["insufficient", "ok"]
        session = session_factory()
        try:
            assert AccountRepository(session).get_balance("user-1") == 5
            assert session.query(SpinRecord).count() == 1
            assert session.query(PointsLedger).count() == 1
        finally:
            session.close()


class TestTicketId:
    def test_format(self):
        assert TICKET_PATTERN.match(generate_ticket_id())

    def test_unique(self):
        ids = {generate_ticket_id() for _ in range(1000)}
        assert len(ids) == 1000
