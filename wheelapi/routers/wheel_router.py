from fastapi import APIRouter, Depends, HTTPException, Query
from starlette.concurrency import run_in_threadpool

from wheelapi.config import settings
from wheelapi.core.exceptions import BaseAPIException
from wheelapi.core.presentation import PresentationTimer
from wheelapi.deps import (
    get_account_service,
    get_current_account,
    get_presentation_timer,
    get_spin_service,
)
from wheelapi.schemas.account import AccountProfile
from wheelapi.schemas.spin import PrizeTableResponse, SpinHistoryResponse, SpinResponse
from wheelapi.services.account_service import AccountService
from wheelapi.services.spin_service import SpinService
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/wheel", tags=["wheel"])


@router.get("/prizes", response_model=PrizeTableResponse)
async def get_prizes(
    spin_service: SpinService = Depends(get_spin_service),
) -> PrizeTableResponse:
    """휠 경품 목록과 당첨 확률"""
    return spin_service.get_prize_table()


@router.post("/spin", response_model=SpinResponse)
async def spin(
    account: AccountProfile = Depends(get_current_account),
    spin_service: SpinService = Depends(get_spin_service),
    timer: PresentationTimer = Depends(get_presentation_timer),
) -> SpinResponse:
    """휠 돌리기

    포인트 차감과 기록 저장이 끝난 뒤 휠 애니메이션 시간만큼 기다렸다가 결과를 반환합니다.
    """
    result = await run_in_threadpool(spin_service.spin, account.id)
    await timer.present(settings.SPIN_REVEAL_DELAY_MS)
    return result


@router.get("/history", response_model=SpinHistoryResponse)
async def get_history(
    limit: int = Query(settings.HISTORY_LIMIT, ge=1, le=100, description="조회 건수"),
    account: AccountProfile = Depends(get_current_account),
    account_service: AccountService = Depends(get_account_service),
) -> SpinHistoryResponse:
    """내 스핀 기록 (최신순)"""
    try:
        return account_service.get_history(account.id, limit=limit)
    except BaseAPIException:
        raise
    except Exception as e:
        logger.error(f"Failed to get spin history: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to retrieve spin history")
