"""
스핀 기록 리포지토리 - 히스토리 저장소

기록은 추가만 하고, 교환(claim) 처리는 claimed = false 조건부 UPDATE 한 번으로 끝낸다.
"""

from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import desc, func, update
from sqlalchemy.orm import Session

from wheelapi.models.spin import SpinRecord
from wheelapi.repositories.base import BaseRepository
from wheelapi.schemas.spin import SpinRecordSchema


class SpinRepository(BaseRepository[SpinRecord, SpinRecordSchema]):
    def __init__(self, db: Session):
        super().__init__(SpinRecord, SpinRecordSchema, db)

    def append(
        self,
        record_id: str,
        account_id: str,
        prize_label: str,
        reward_tag: str,
        cost: int,
        claim_ticket_id: str,
        created_at: datetime,
    ) -> SpinRecordSchema:
        record = SpinRecord(
            id=record_id,
            account_id=account_id,
            prize_label=prize_label,
            reward_tag=reward_tag,
            cost=cost,
            claim_ticket_id=claim_ticket_id,
            claimed=False,
            created_at=created_at,
        )
        self.db.add(record)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return self._to_schema(record)

    def get(self, account_id: str, limit: int = 20) -> List[SpinRecordSchema]:
        """최신순 스핀 기록"""
        rows = (
            self.db.query(SpinRecord)
            .execution_options(populate_existing=True)
            .filter(SpinRecord.account_id == account_id)
            .order_by(desc(SpinRecord.created_at))
            .limit(limit)
            .all()
        )
        return self._to_schemas(rows)

    def count_for_account(self, account_id: str) -> int:
        return (
            self.db.query(func.count(SpinRecord.id))
            .filter(SpinRecord.account_id == account_id)
            .scalar()
            or 0
        )

    def find_by_ticket_id(self, ticket_id: str) -> Optional[SpinRecordSchema]:
        row = (
            self.db.query(SpinRecord)
            .execution_options(populate_existing=True)
            .filter(SpinRecord.claim_ticket_id == ticket_id)
            .first()
        )
        return self._to_schema(row)

    def conditional_claim(
        self, ticket_id: str, claimed_by: str, claimed_at: datetime
    ) -> bool:
        """claimed = false 인 경우에만 교환 처리. 성공하면 True"""
        result = self.db.execute(
            update(SpinRecord)
            .where(SpinRecord.claim_ticket_id == ticket_id)
            .where(SpinRecord.claimed.is_(False))
            .values(claimed=True, claimed_at=claimed_at, claimed_by=claimed_by)
            .execution_options(synchronize_session=False)
        )
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return result.rowcount == 1

    def get_ticket_stats(self) -> Dict[str, int]:
        total = self.db.query(func.count(SpinRecord.id)).scalar() or 0
        claimed = (
            self.db.query(func.count(SpinRecord.id))
            .filter(SpinRecord.claimed.is_(True))
            .scalar()
            or 0
        )
        return {"total": total, "claimed": claimed, "unclaimed": total - claimed}

    def list_with_labels(self, labels: List[str]) -> List[SpinRecord]:
        """특정 경품명을 가진 기록 전체 (배치 작업용)

        작업이 레코드를 고치면 필터 결과가 바뀌므로 페이지 단위가 아니라 한 번에 읽는다.
        """
        return (
            self.db.query(SpinRecord)
            .filter(SpinRecord.prize_label.in_(labels))
            .order_by(SpinRecord.id)
            .all()
        )
