"""
포인트 원장 리포지토리

원장은 accounts.balance 변동의 감사 기록이다. 잔액 자체는
AccountRepository.atomic_adjust 가 원장 기록과 같은 커밋에서 갱신한다.
"""

from typing import List

from sqlalchemy import desc
from sqlalchemy.orm import Session

from wheelapi.models.points import PointsLedger as PointsLedgerModel
from wheelapi.repositories.base import BaseRepository
from wheelapi.schemas.points import PointsLedgerEntry

SPIN_DEBIT_PREFIX = "spin_debit_"
SPIN_REFUND_PREFIX = "spin_refund_"


class PointsRepository(BaseRepository[PointsLedgerModel, PointsLedgerEntry]):
    def __init__(self, db: Session):
        super().__init__(PointsLedgerModel, PointsLedgerEntry, db)

    def _to_ledger_entry(self, model_instance: PointsLedgerModel) -> PointsLedgerEntry:
        """delta_points 부호로 CREDIT/DEBIT 결정"""
        delta_points = model_instance.delta_points
        return PointsLedgerEntry(
            id=model_instance.id,
            transaction_type="CREDIT" if delta_points > 0 else "DEBIT",
            delta_points=delta_points,
            balance_after=model_instance.balance_after,
            reason=model_instance.reason,
            ref_id=model_instance.ref_id,
            created_at=model_instance.created_at,
        )

    def get_user_ledger(
        self, account_id: str, limit: int = 50, offset: int = 0
    ) -> List[PointsLedgerEntry]:
        """계정 원장 조회 (최신순)"""
        model_instances = (
            self.db.query(self.model_class)
            .filter(self.model_class.account_id == account_id)
            .order_by(desc(self.model_class.id))
            .limit(limit)
            .offset(offset)
            .all()
        )
        return [self._to_ledger_entry(instance) for instance in model_instances]

    def count_for_account(self, account_id: str) -> int:
        return (
            self.db.query(self.model_class)
            .filter(self.model_class.account_id == account_id)
            .count()
        )

    def transaction_exists(self, ref_id: str) -> bool:
        """거래 존재 여부 확인 (멱등성 체크용)"""
        return (
            self.db.query(self.model_class.id)
            .filter(self.model_class.ref_id == ref_id)
            .first()
            is not None
        )

    def list_spin_debits(self) -> List[PointsLedgerModel]:
        """스핀 차감 기록 전체 (정산 작업용)"""
        return (
            self.db.query(self.model_class)
            .filter(self.model_class.ref_id.startswith(SPIN_DEBIT_PREFIX, autoescape=True))
            .order_by(self.model_class.id)
            .all()
        )
