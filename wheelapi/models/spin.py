from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from wheelapi.models.base import BaseModel


class SpinRecord(BaseModel):
    """
    스핀 기록 테이블 - 한 번의 성공한 스핀 결과

    claimed 관련 필드를 제외하면 생성 후 수정되지 않는다.
    claimed 는 False -> True 로 한 번만 바뀐다.
    """

    __tablename__ = "spin_records"
    __table_args__ = (
        Index("ix_spin_records_account_created", "account_id", "created_at"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    account_id: Mapped[str] = mapped_column(
        String(128), ForeignKey("accounts.id"), nullable=False
    )
    prize_label: Mapped[str] = mapped_column(Text, nullable=False)
    reward_tag: Mapped[str] = mapped_column(Text, nullable=False, default="")
    cost: Mapped[int] = mapped_column(Integer, nullable=False)

    # QR 코드로 제시되는 교환 티켓
    claim_ticket_id: Mapped[str] = mapped_column(
        String(64), nullable=False, unique=True
    )
    claimed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    claimed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    claimed_by: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
