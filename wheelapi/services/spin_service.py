import logging
import secrets
import string
import time
import uuid
from datetime import datetime, timezone
from typing import Callable, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from wheelapi.config import Settings
from wheelapi.core.exceptions import (
    InsufficientBalanceError,
    InvalidInputError,
    PersistenceError,
)
from wheelapi.core.prizes import PrizeDefinition, build_prize_table, select
from wheelapi.repositories.account_repository import AccountRepository
from wheelapi.repositories.points_repository import SPIN_DEBIT_PREFIX
from wheelapi.repositories.spin_repository import SpinRepository
from wheelapi.schemas.spin import PrizeItem, PrizeTableResponse, SpinResponse

logger = logging.getLogger(__name__)

RandomSource = Callable[[], float]

_BASE36 = string.digits + string.ascii_lowercase
# os.urandom 기반이라 호출 간에 공유되는 시드 상태가 없음
_system_random = secrets.SystemRandom()


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def generate_ticket_id() -> str:
    """교환 티켓 ID: <밀리초 타임스탬프 base36>-<랜덤 6자리>"""
    suffix = "".join(secrets.choice(_BASE36) for _ in range(6))
    return f"{_to_base36(int(time.time() * 1000))}-{suffix}"


class SpinService:
    """휠 스핀 한 번의 처리: 잔액 확인 → 추첨 → 차감 → 기록"""

    def __init__(
        self,
        db: Session,
        settings: Settings,
        prizes: Optional[Sequence[PrizeDefinition]] = None,
        random_source: Optional[RandomSource] = None,
    ):
        self.db = db
        self.settings = settings
        self.account_repo = AccountRepository(db)
        self.spin_repo = SpinRepository(db)
        self.prizes = (
            tuple(prizes) if prizes is not None else build_prize_table(settings.PRIZE_TABLE)
        )
        self.random_source = random_source or _system_random.random

    def get_prize_table(self) -> PrizeTableResponse:
        total = sum(p.weight for p in self.prizes)
        return PrizeTableResponse(
            prizes=[
                PrizeItem(
                    index=i,
                    label=p.label,
                    reward_tag=p.reward_tag,
                    weight=p.weight,
                    probability=p.weight / total,
                )
                for i, p in enumerate(self.prizes)
            ],
            spin_cost=self.settings.SPIN_COST_POINTS,
            reveal_delay_ms=self.settings.SPIN_REVEAL_DELAY_MS,
        )

    def spin(self, account_id: str, cost: Optional[int] = None) -> SpinResponse:
        """스핀 실행

        Args:
            account_id: 계정 ID
            cost: 차감 포인트 (기본값: SPIN_COST_POINTS)

        Returns:
            SpinResponse: 저장된 SpinRecord, 당첨 인덱스, 차감 후 잔액

        Raises:
            AccountNotFoundError, InsufficientBalanceError, PersistenceError

        차감 후 기록 저장이 실패하면 차감은 되돌리지 않는다.
        원장에 남은 spin_debit_<ticket> 으로 reconcile-spins 작업이 환불한다.
        """
        if cost is None:
            cost = self.settings.SPIN_COST_POINTS
        if isinstance(cost, bool) or not isinstance(cost, int) or cost <= 0:
            raise InvalidInputError(f"Spin cost must be a positive integer, got {cost!r}")

        try:
            balance = self.account_repo.get_balance(account_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to load account {account_id}: {str(e)}")
            raise PersistenceError() from e

        if balance < cost:
            raise InsufficientBalanceError(
                f"Insufficient points. Required: {cost}, Available: {balance}",
                details={"required": cost, "available": balance},
            )

        prize_index = select(self.prizes, self.random_source())
        prize = self.prizes[prize_index]
        ticket_id = generate_ticket_id()

        try:
            balance_after = self.account_repo.atomic_adjust(
                account_id,
                -cost,
                reason=f"Wheel spin: {prize.label}",
                ref_id=f"{SPIN_DEBIT_PREFIX}{ticket_id}",
            )
        except SQLAlchemyError as e:
            logger.error(f"Spin debit failed for account {account_id}: {str(e)}")
            raise PersistenceError() from e

        try:
            record = self.spin_repo.append(
                record_id=str(uuid.uuid4()),
                account_id=account_id,
                prize_label=prize.label,
                reward_tag=prize.reward_tag,
                cost=cost,
                claim_ticket_id=ticket_id,
                created_at=datetime.now(timezone.utc),
            )
        except SQLAlchemyError as e:
            logger.error(
                f"Spin record not persisted after debit: account={account_id} "
                f"ticket={ticket_id} cost={cost}: {str(e)}"
            )
            raise PersistenceError(
                details={"ticket_id": ticket_id, "balance_debited": True}
            ) from e

        logger.info(
            f"Spin by {account_id}: prize #{prize_index} {prize.label} "
            f"ticket={ticket_id} balance={balance_after}"
        )
        return SpinResponse(
            record=record, prize_index=prize_index, balance_after=balance_after
        )
