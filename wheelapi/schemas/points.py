from pydantic import BaseModel, Field
from datetime import datetime
from typing import List, Literal, Optional


class PointsLedgerEntry(BaseModel):
    """원장 한 줄 (잔액 변동 1건)"""

    id: int
    transaction_type: Literal["CREDIT", "DEBIT"]
    delta_points: int = Field(..., description="양수: 적립, 음수: 차감")
    balance_after: int = Field(..., ge=0)
    reason: str
    ref_id: str = Field(..., description="spin_debit_<ticket>, bonus_<campaign>_<account> 등")
    created_at: Optional[datetime] = None


class PointsLedgerResponse(BaseModel):
    balance: int
    entries: List[PointsLedgerEntry]
    total_count: int
    has_next: bool
