"""
계정 리포지토리 - 잔액 저장소

잔액 변경은 항상 DB 쪽 원자적 UPDATE 로 처리한다.
(balance = balance + :delta WHERE balance + :delta >= 0)
캐시된 잔액을 읽고 다시 쓰는 방식은 사용하지 않는다.
"""

from typing import Iterator, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from wheelapi.core.exceptions import AccountNotFoundError, InsufficientBalanceError
from wheelapi.models.account import Account, AccountRole
from wheelapi.models.points import PointsLedger
from wheelapi.repositories.base import BaseRepository
from wheelapi.schemas.account import AccountProfile, Identity


class AccountRepository(BaseRepository[Account, AccountProfile]):
    def __init__(self, db: Session):
        super().__init__(Account, AccountProfile, db)

    def get(self, account_id: str) -> Optional[AccountProfile]:
        return self.get_by_id(account_id)

    def get_balance(self, account_id: str) -> int:
        balance = self.db.execute(
            select(Account.balance).where(Account.id == account_id)
        ).scalar_one_or_none()
        if balance is None:
            raise AccountNotFoundError(f"Account not found: {account_id}")
        return balance

    def create_from_identity(self, identity: Identity) -> AccountProfile:
        """identity 정보로 계정 생성 (동시 생성 시 기존 계정 반환)"""
        account = Account(
            id=identity.account_id,
            display_name=identity.display_name or "Anonymous",
            email=identity.email,
            avatar_url=identity.avatar_url,
            role=identity.role.value,
            balance=0,
        )
        self.db.add(account)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            existing = self.get(identity.account_id)
            if existing is None:
                raise
            return existing
        self.db.refresh(account)
        return self._to_schema(account)

    def atomic_adjust(
        self,
        account_id: str,
        delta: int,
        reason: str,
        ref_id: str,
        commit: bool = True,
    ) -> int:
        """
        잔액을 delta 만큼 원자적으로 조정하고 원장에 기록

        Returns:
            int: 조정 후 잔액

        Raises:
            AccountNotFoundError: 계정이 없음
            InsufficientBalanceError: 조정 결과가 음수가 됨 (아무것도 변경되지 않음)
        """
        result = self.db.execute(
            update(Account)
            .where(Account.id == account_id)
            .where(Account.balance + delta >= 0)
            .values(balance=Account.balance + delta)
            .execution_options(synchronize_session=False)
        )

        if result.rowcount != 1:
            self.db.rollback()
            current = self.db.execute(
                select(Account.balance).where(Account.id == account_id)
            ).scalar_one_or_none()
            if current is None:
                raise AccountNotFoundError(f"Account not found: {account_id}")
            raise InsufficientBalanceError(
                f"Insufficient balance. Required: {-delta}, Available: {current}",
                details={"required": -delta, "available": current},
            )

        # UPDATE 가 행 잠금을 잡고 있으므로 같은 트랜잭션에서 읽은 값이 조정 후 잔액
        balance_after = self.db.execute(
            select(Account.balance).where(Account.id == account_id)
        ).scalar_one()

        self.db.add(
            PointsLedger(
                account_id=account_id,
                delta_points=delta,
                reason=reason,
                ref_id=ref_id,
                balance_after=balance_after,
            )
        )
        try:
            self.db.flush()
            if commit:
                self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return balance_after

    def iter_all(self, batch_size: int = 500) -> Iterator[Account]:
        """배치 작업용 전체 계정 순회"""
        offset = 0
        while True:
            rows = (
                self.db.query(Account)
                .execution_options(populate_existing=True)
                .order_by(Account.id)
                .offset(offset)
                .limit(batch_size)
                .all()
            )
            if not rows:
                return
            yield from rows
            offset += batch_size

    def is_super_admin(self, account: Account) -> bool:
        return account.role == AccountRole.SUPER_ADMIN.value
