import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from wheelapi.config import Settings
from wheelapi.core.exceptions import AccountNotFoundError
from wheelapi.repositories.account_repository import AccountRepository
from wheelapi.repositories.points_repository import PointsRepository
from wheelapi.repositories.spin_repository import SpinRepository
from wheelapi.schemas.account import (
    AccountProfile,
    Identity,
    PointsAdjustmentResponse,
)
from wheelapi.schemas.points import PointsLedgerResponse
from wheelapi.schemas.spin import SpinHistoryResponse

logger = logging.getLogger(__name__)


class AccountService:
    """계정/포인트 관련 비즈니스 로직"""

    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.settings = settings
        self.account_repo = AccountRepository(db)
        self.points_repo = PointsRepository(db)
        self.spin_repo = SpinRepository(db)

    def ensure_account(self, identity: Identity) -> AccountProfile:
        """첫 요청 시 계정 생성 (잔액 0)"""
        account = self.account_repo.get(identity.account_id)
        if account is not None:
            return account

        account = self.account_repo.create_from_identity(identity)
        logger.info(f"Created account {account.id} ({account.display_name})")
        return account

    def get_profile(self, account_id: str) -> AccountProfile:
        account = self.account_repo.get(account_id)
        if account is None:
            raise AccountNotFoundError(f"Account not found: {account_id}")
        return account

    def get_balance(self, account_id: str) -> int:
        return self.account_repo.get_balance(account_id)

    def get_history(
        self, account_id: str, limit: Optional[int] = None
    ) -> SpinHistoryResponse:
        """스핀 기록 (최신순)"""
        if limit is None:
            limit = self.settings.HISTORY_LIMIT
        history = self.spin_repo.get(account_id, limit=limit)
        return SpinHistoryResponse(
            history=history,
            total_count=self.spin_repo.count_for_account(account_id),
        )

    def get_ledger(
        self, account_id: str, limit: int = 50, offset: int = 0
    ) -> PointsLedgerResponse:
        """포인트 거래 내역

        Args:
            account_id: 계정 ID
            limit: 페이지 크기 (최대 100)
            offset: 오프셋
        """
        limit = min(limit, 100)
        total_count = self.points_repo.count_for_account(account_id)
        return PointsLedgerResponse(
            balance=self.account_repo.get_balance(account_id),
            entries=self.points_repo.get_user_ledger(
                account_id, limit=limit, offset=offset
            ),
            total_count=total_count,
            has_next=offset + limit < total_count,
        )

    def admin_adjust(
        self, account_id: str, amount: int, reason: str, admin_id: str
    ) -> PointsAdjustmentResponse:
        """관리자 포인트 조정 (음수 잔액이 되는 조정은 거부)"""
        ref_id = (
            f"admin_adjustment_{admin_id}_{int(datetime.now(timezone.utc).timestamp())}"
            f"_{uuid.uuid4().hex[:8]}"
        )
        balance_after = self.account_repo.atomic_adjust(
            account_id,
            amount,
            reason=f"Admin adjustment by {admin_id}: {reason}",
            ref_id=ref_id,
        )
        logger.info(
            f"Admin {admin_id} adjusted {account_id} by {amount} -> {balance_after} ({reason})"
        )
        return PointsAdjustmentResponse(
            account_id=account_id,
            delta_points=amount,
            balance_after=balance_after,
            ref_id=ref_id,
        )
