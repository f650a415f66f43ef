from fastapi import APIRouter, Depends, Path, Query

from wheelapi.core.auth_middleware import require_admin
from wheelapi.deps import get_account_service, get_job_service
from wheelapi.schemas.account import (
    AccountProfile,
    AdminPointsAdjustmentRequest,
    Identity,
    PointsAdjustmentResponse,
)
from wheelapi.schemas.jobs import JobRunRequest, JobRunResponse
from wheelapi.schemas.points import PointsLedgerResponse
from wheelapi.services.account_service import AccountService
from wheelapi.services.job_service import JobService
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/accounts/{account_id}", response_model=AccountProfile)
async def get_account(
    account_id: str = Path(..., description="계정 ID"),
    admin: Identity = Depends(require_admin),
    account_service: AccountService = Depends(get_account_service),
) -> AccountProfile:
    """계정 프로필과 잔액 (관리자 전용)"""
    return account_service.get_profile(account_id)


@router.get("/accounts/{account_id}/ledger", response_model=PointsLedgerResponse)
async def get_account_ledger(
    account_id: str = Path(..., description="계정 ID"),
    limit: int = Query(50, ge=1, le=100, description="페이지 크기"),
    offset: int = Query(0, ge=0, description="오프셋"),
    admin: Identity = Depends(require_admin),
    account_service: AccountService = Depends(get_account_service),
) -> PointsLedgerResponse:
    """특정 계정의 포인트 변동 내역 (관리자 감사용)"""
    return account_service.get_ledger(account_id, limit=limit, offset=offset)


@router.post("/accounts/{account_id}/points", response_model=PointsAdjustmentResponse)
async def adjust_points(
    request: AdminPointsAdjustmentRequest,
    account_id: str = Path(..., description="계정 ID"),
    admin: Identity = Depends(require_admin),
    account_service: AccountService = Depends(get_account_service),
) -> PointsAdjustmentResponse:
    """포인트 조정 (관리자 전용)"""
    return account_service.admin_adjust(
        account_id, request.amount, request.reason, admin_id=admin.account_id
    )


@router.post("/jobs/{job_name}", response_model=JobRunResponse)
async def run_job(
    request: JobRunRequest,
    job_name: str = Path(..., description="작업 이름"),
    admin: Identity = Depends(require_admin),
    job_service: JobService = Depends(get_job_service),
) -> JobRunResponse:
    """배치 작업 실행 (관리자 전용)

    같은 작업을 다시 실행해도 이미 처리된 레코드는 건너뜁니다.
    """
    logger.info(f"Admin {admin.account_id} running job {job_name} (dry_run={request.dry_run})")
    return job_service.run(job_name, request.params, dry_run=request.dry_run)
