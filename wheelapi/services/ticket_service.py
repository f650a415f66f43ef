import logging
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from wheelapi.core.exceptions import AlreadyClaimedError, TicketNotFoundError
from wheelapi.repositories.account_repository import AccountRepository
from wheelapi.repositories.spin_repository import SpinRepository
from wheelapi.schemas.spin import SpinRecordSchema, TicketDetail, TicketStatsResponse

logger = logging.getLogger(__name__)


class TicketService:
    """교환 티켓 조회 및 교환 처리"""

    def __init__(self, db: Session):
        self.db = db
        self.spin_repo = SpinRepository(db)
        self.account_repo = AccountRepository(db)

    def get_ticket(self, ticket_id: str) -> TicketDetail:
        record = self.spin_repo.find_by_ticket_id(ticket_id)
        if record is None:
            raise TicketNotFoundError(f"Ticket not found: {ticket_id}")

        owner = self.account_repo.get(record.account_id)
        return TicketDetail(
            record=record,
            owner_name=owner.display_name if owner else "",
        )

    def claim(self, ticket_id: str, claimed_by: str) -> SpinRecordSchema:
        """티켓 교환 처리

        조건부 UPDATE 한 번으로 처리하므로 동시에 요청해도 한 번만 성공한다.

        Raises:
            TicketNotFoundError: 존재하지 않는 티켓
            AlreadyClaimedError: 이미 교환된 티켓
        """
        claimed = self.spin_repo.conditional_claim(
            ticket_id, claimed_by=claimed_by, claimed_at=datetime.now(timezone.utc)
        )
        record = self.spin_repo.find_by_ticket_id(ticket_id)

        if record is None:
            raise TicketNotFoundError(f"Ticket not found: {ticket_id}")
        if not claimed:
            logger.warning(
                f"Ticket {ticket_id} already claimed by {record.claimed_by} at {record.claimed_at}"
            )
            raise AlreadyClaimedError(
                f"Ticket already claimed: {ticket_id}",
                details={
                    "claimed_by": record.claimed_by,
                    "claimed_at": record.claimed_at.isoformat() if record.claimed_at else None,
                },
            )

        logger.info(f"Ticket {ticket_id} ({record.prize_label}) claimed by {claimed_by}")
        return record

    def get_stats(self) -> TicketStatsResponse:
        return TicketStatsResponse(**self.spin_repo.get_ticket_stats())
