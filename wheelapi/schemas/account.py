from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional

from wheelapi.models.account import AccountRole


class Identity(BaseModel):
    """identity provider 가 토큰으로 전달하는 사용자 정보"""

    account_id: str
    display_name: str = ""
    email: Optional[str] = None
    avatar_url: Optional[str] = None
    role: AccountRole = AccountRole.USER

    @property
    def is_staff(self) -> bool:
        return AccountRole.has_permission(self.role, AccountRole.STAFF)

    @property
    def is_admin(self) -> bool:
        return AccountRole.has_permission(self.role, AccountRole.ADMIN)


class AccountProfile(BaseModel):
    """계정 프로필 + 잔액"""

    id: str
    display_name: str
    email: Optional[str] = None
    avatar_url: Optional[str] = None
    role: AccountRole = AccountRole.USER
    balance: int = Field(..., ge=0, description="현재 포인트 잔액")
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AdminPointsAdjustmentRequest(BaseModel):
    """관리자 포인트 조정 요청"""

    amount: int = Field(..., description="조정할 포인트 (양수: 추가, 음수: 차감)")
    reason: str = Field(..., min_length=1, max_length=255, description="조정 사유")

    @field_validator("amount")
    @classmethod
    def amount_not_zero(cls, v: int) -> int:
        if v == 0:
            raise ValueError("amount must not be 0")
        return v


class PointsAdjustmentResponse(BaseModel):
    account_id: str
    delta_points: int
    balance_after: int
    ref_id: str
