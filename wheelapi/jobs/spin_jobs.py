import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable

from sqlalchemy.orm import Session

from wheelapi.core.exceptions import InvalidInputError
from wheelapi.jobs.base import BatchJob
from wheelapi.models.points import PointsLedger
from wheelapi.models.spin import SpinRecord
from wheelapi.repositories.account_repository import AccountRepository
from wheelapi.repositories.points_repository import (
    SPIN_DEBIT_PREFIX,
    SPIN_REFUND_PREFIX,
    PointsRepository,
)
from wheelapi.repositories.spin_repository import SpinRepository

logger = logging.getLogger(__name__)


class RenamePrizeLabelsJob(BatchJob):
    """과거 스핀 기록의 경품명을 새 이름으로 변경"""

    name = "rename-prizes"

    def __init__(self, db: Session, mapping: Dict[str, str]):
        super().__init__(db)
        if not mapping:
            raise InvalidInputError("mapping must not be empty")
        chained = set(mapping) & set(mapping.values())
        if chained:
            # A->B, B->C 같은 연쇄 매핑은 재실행 시 결과가 달라짐
            raise InvalidInputError(f"Labels are both renamed and rename targets: {sorted(chained)}")
        self.mapping = mapping
        self.spin_repo = SpinRepository(db)

    def records(self) -> Iterable[SpinRecord]:
        return self.spin_repo.list_with_labels(list(self.mapping))

    def is_migrated(self, record: SpinRecord) -> bool:
        return record.prize_label not in self.mapping

    def migrate(self, record: SpinRecord) -> None:
        record.prize_label = self.mapping[record.prize_label]
        self.db.commit()

    def describe(self, record: SpinRecord) -> str:
        return f"{record.claim_ticket_id} ({record.prize_label})"


class ReconcileSpinDebitsJob(BatchJob):
    """
    차감은 되었지만 스핀 기록이 저장되지 않은 건을 환불

    spin_debit_<ticket> 원장 항목에 대응하는 SpinRecord 가 없으면
    spin_refund_<ticket> 으로 한 번만 환불한다. 진행 중인 스핀을 건드리지 않도록
    min_age_seconds 보다 최근 항목은 건너뛴다.
    """

    name = "reconcile-spins"

    def __init__(self, db: Session, min_age_seconds: int = 300):
        super().__init__(db)
        if min_age_seconds < 0:
            raise InvalidInputError("min_age_seconds must be >= 0")
        self.min_age = timedelta(seconds=min_age_seconds)
        self.cutoff = datetime.now(timezone.utc) - self.min_age
        self.account_repo = AccountRepository(db)
        self.points_repo = PointsRepository(db)
        self.spin_repo = SpinRepository(db)

    @staticmethod
    def _ticket_id(entry: PointsLedger) -> str:
        return entry.ref_id[len(SPIN_DEBIT_PREFIX):]

    def _is_recent(self, entry: PointsLedger) -> bool:
        created_at = entry.created_at
        if created_at is None:
            return False
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        return created_at > self.cutoff

    def records(self) -> Iterable[PointsLedger]:
        return self.points_repo.list_spin_debits()

    def is_migrated(self, entry: PointsLedger) -> bool:
        ticket_id = self._ticket_id(entry)
        if self.spin_repo.find_by_ticket_id(ticket_id) is not None:
            return True
        if self.points_repo.transaction_exists(f"{SPIN_REFUND_PREFIX}{ticket_id}"):
            return True
        return self._is_recent(entry)

    def migrate(self, entry: PointsLedger) -> None:
        ticket_id = self._ticket_id(entry)
        refund = -entry.delta_points
        logger.warning(
            f"Refunding {refund} points to {entry.account_id}: no spin record for ticket {ticket_id}"
        )
        self.account_repo.atomic_adjust(
            entry.account_id,
            refund,
            reason=f"Refund: spin record missing for ticket {ticket_id}",
            ref_id=f"{SPIN_REFUND_PREFIX}{ticket_id}",
        )

    def describe(self, entry: PointsLedger) -> str:
        return entry.ref_id
