from fastapi import Depends
from sqlalchemy.orm import Session

from wheelapi.config import settings
from wheelapi.core.auth_middleware import get_current_identity
from wheelapi.core.presentation import PresentationTimer
from wheelapi.database.session import get_db
from wheelapi.schemas.account import AccountProfile, Identity

# Services
from wheelapi.services.account_service import AccountService
from wheelapi.services.job_service import JobService
from wheelapi.services.spin_service import SpinService
from wheelapi.services.ticket_service import TicketService


def get_account_service(db: Session = Depends(get_db)) -> AccountService:
    return AccountService(db=db, settings=settings)


def get_spin_service(db: Session = Depends(get_db)) -> SpinService:
    return SpinService(db=db, settings=settings)


def get_ticket_service(db: Session = Depends(get_db)) -> TicketService:
    return TicketService(db=db)


def get_job_service(db: Session = Depends(get_db)) -> JobService:
    return JobService(db=db)


def get_presentation_timer() -> PresentationTimer:
    return PresentationTimer()


def get_current_account(
    identity: Identity = Depends(get_current_identity),
    account_service: AccountService = Depends(get_account_service),
) -> AccountProfile:
    """토큰의 계정을 조회하고 없으면 생성"""
    return account_service.ensure_account(identity)
