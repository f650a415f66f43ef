from fastapi import APIRouter, Depends, HTTPException, Query

from wheelapi.core.exceptions import BaseAPIException
from wheelapi.deps import get_account_service, get_current_account
from wheelapi.schemas.account import AccountProfile
from wheelapi.schemas.points import PointsLedgerResponse
from wheelapi.services.account_service import AccountService
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/accounts", tags=["accounts"])


@router.get("/me", response_model=AccountProfile)
async def get_me(
    account: AccountProfile = Depends(get_current_account),
) -> AccountProfile:
    """내 프로필과 포인트 잔액"""
    return account


@router.get("/me/ledger", response_model=PointsLedgerResponse)
async def get_my_ledger(
    limit: int = Query(50, ge=1, le=100, description="페이지 크기"),
    offset: int = Query(0, ge=0, description="오프셋"),
    account: AccountProfile = Depends(get_current_account),
    account_service: AccountService = Depends(get_account_service),
) -> PointsLedgerResponse:
    """내 포인트 거래 내역"""
    try:
        return account_service.get_ledger(account.id, limit=limit, offset=offset)
    except BaseAPIException:
        raise
    except Exception as e:
        logger.error(f"Failed to get ledger: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to retrieve ledger")
