from enum import Enum
from typing import Optional, Union

from sqlalchemy import BigInteger, CheckConstraint, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from wheelapi.models.base import BaseModel


class AccountRole(str, Enum):
    """계정 역할 정의"""

    USER = "user"  # 일반 참가자
    STAFF = "staff"  # 경품 교환 담당
    ADMIN = "admin"  # 관리자
    SUPER_ADMIN = "super_admin"  # 최고 관리자

    @classmethod
    def get_hierarchy_level(cls, role: Union[str, "AccountRole"]) -> int:
        """역할의 계층 레벨을 반환 (숫자가 높을수록 높은 권한)"""
        if isinstance(role, cls):
            role = role.value

        hierarchy = {
            cls.USER.value: 1,
            cls.STAFF.value: 2,
            cls.ADMIN.value: 3,
            cls.SUPER_ADMIN.value: 4,
        }
        return hierarchy.get(str(role), 0)

    @classmethod
    def has_permission(
        cls,
        role: Union[str, "AccountRole"],
        required_role: Union[str, "AccountRole"],
    ) -> bool:
        """역할이 요구되는 역할 이상인지 확인"""
        return cls.get_hierarchy_level(role) >= cls.get_hierarchy_level(
            required_role
        )


class Account(BaseModel):
    """참가자 계정 - 포인트 잔액과 프로필"""

    __tablename__ = "accounts"
    __table_args__ = (CheckConstraint("balance >= 0", name="ck_accounts_balance"),)

    # identity provider가 발급한 안정적인 ID
    id: Mapped[str] = mapped_column(String(128), primary_key=True)
    display_name: Mapped[str] = mapped_column(Text, nullable=False, default="")
    email: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    avatar_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    role: Mapped[str] = mapped_column(
        String(20), nullable=False, default=AccountRole.USER.value
    )
    balance: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
