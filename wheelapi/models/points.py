"""
포인트 원장 데이터 모델

잔액 변동은 모두 이 테이블에 기록된다. accounts.balance 가 현재 잔액이고,
원장은 감사 추적과 정산(reconciliation) 작업의 근거가 된다.
"""

from sqlalchemy import BigInteger, Column, ForeignKey, Integer, String, Text
from sqlalchemy.schema import UniqueConstraint

from wheelapi.models.base import AppendOnlyModel


class PointsLedger(AppendOnlyModel):
    """
    포인트 원장 테이블

    - 불변성: 한번 생성된 레코드는 수정되지 않음
    - 멱등성: ref_id 유니크 제약으로 중복 처리 방지
    """

    __tablename__ = "points_ledger"
    __table_args__ = (UniqueConstraint("ref_id"),)

    # SQLite 는 INTEGER PRIMARY KEY 만 자동 증가
    id = Column(
        BigInteger().with_variant(Integer, "sqlite"),
        primary_key=True,
        autoincrement=True,
    )

    account_id = Column(String(128), ForeignKey("accounts.id"), nullable=False)

    # 양수면 증가, 음수면 감소
    delta_points = Column(BigInteger, nullable=False)

    reason = Column(Text, nullable=False)

    # 형식 예시: "spin_debit_<ticket>", "bonus_day1_<account>"
    ref_id = Column(Text, nullable=False)

    balance_after = Column(BigInteger, nullable=False)
