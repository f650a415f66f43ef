from pydantic import BaseModel, Field
from datetime import datetime
from typing import List, Optional


class PrizeItem(BaseModel):
    """휠 경품 항목"""

    index: int
    label: str
    reward_tag: str
    weight: float
    probability: float = Field(..., description="weight / 전체 weight")


class PrizeTableResponse(BaseModel):
    prizes: List[PrizeItem]
    spin_cost: int
    reveal_delay_ms: int


class SpinRecordSchema(BaseModel):
    """스핀 기록"""

    id: str
    account_id: str
    prize_label: str
    reward_tag: str
    cost: int
    created_at: Optional[datetime] = None
    claim_ticket_id: str
    claimed: bool = False
    claimed_at: Optional[datetime] = None
    claimed_by: Optional[str] = None

    class Config:
        from_attributes = True


class SpinResponse(BaseModel):
    """스핀 결과"""

    record: SpinRecordSchema
    prize_index: int
    balance_after: int


class SpinHistoryResponse(BaseModel):
    history: List[SpinRecordSchema]
    total_count: int


class TicketDetail(BaseModel):
    """교환 창구에서 보는 티켓 정보"""

    record: SpinRecordSchema
    owner_name: str


class TicketStatsResponse(BaseModel):
    total: int
    claimed: int
    unclaimed: int
