import logging
import uuid
from datetime import datetime, timezone
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from wheelapi.core.exceptions import InvalidInputError
from wheelapi.jobs.base import BatchJob
from wheelapi.models.account import Account
from wheelapi.repositories.account_repository import AccountRepository
from wheelapi.repositories.points_repository import PointsRepository

logger = logging.getLogger(__name__)


class GrantBonusPointsJob(BatchJob):
    """모든 계정에 캠페인 보너스 포인트를 한 번씩 지급"""

    name = "grant-bonus"

    def __init__(self, db: Session, campaign: str, amount: int, reason: str = ""):
        super().__init__(db)
        if not campaign:
            raise InvalidInputError("campaign is required")
        if "_" in campaign:
            # ref_id 가 bonus_<campaign>_<account> 이므로 campaign 에 _ 가 있으면 구분이 모호해짐
            raise InvalidInputError(f"campaign must not contain '_': {campaign!r}")
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise InvalidInputError(f"amount must be a positive integer, got {amount!r}")
        self.campaign = campaign
        self.amount = amount
        self.reason = reason or f"Bonus: {campaign}"
        self.account_repo = AccountRepository(db)
        self.points_repo = PointsRepository(db)

    def _ref_id(self, account: Account) -> str:
        return f"bonus_{self.campaign}_{account.id}"

    def records(self) -> Iterable[Account]:
        return self.account_repo.iter_all()

    def is_migrated(self, account: Account) -> bool:
        return self.points_repo.transaction_exists(self._ref_id(account))

    def migrate(self, account: Account) -> None:
        self.account_repo.atomic_adjust(
            account.id, self.amount, reason=self.reason, ref_id=self._ref_id(account)
        )


class ResetPointsJob(BatchJob):
    """super_admin 을 제외한 모든 계정 잔액을 0 으로

    완료 여부는 잔액 0 으로만 판단한다. 같은 tag 로 다시 실행하면 그 사이 생긴 포인트도 초기화된다.
    """

    name = "reset-points"

    def __init__(self, db: Session, tag: Optional[str] = None):
        super().__init__(db)
        self.tag = tag or str(int(datetime.now(timezone.utc).timestamp()))
        self.account_repo = AccountRepository(db)

    def records(self) -> Iterable[Account]:
        return self.account_repo.iter_all()

    def is_migrated(self, account: Account) -> bool:
        if self.account_repo.is_super_admin(account):
            return True
        return self.account_repo.get_balance(account.id) == 0

    def migrate(self, account: Account) -> None:
        balance = self.account_repo.get_balance(account.id)
        self.account_repo.atomic_adjust(
            account.id,
            -balance,
            reason=f"Points reset ({self.tag})",
            ref_id=f"reset_{self.tag}_{account.id}_{uuid.uuid4().hex[:8]}",
        )

    def describe(self, account: Account) -> str:
        return f"{account.id} ({account.email or account.display_name})"
