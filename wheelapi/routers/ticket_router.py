from fastapi import APIRouter, Depends, Path

from wheelapi.core.auth_middleware import require_staff
from wheelapi.deps import get_ticket_service
from wheelapi.schemas.account import Identity
from wheelapi.schemas.spin import SpinRecordSchema, TicketDetail, TicketStatsResponse
from wheelapi.services.ticket_service import TicketService

router = APIRouter(prefix="/tickets", tags=["tickets"])


@router.get("/stats", response_model=TicketStatsResponse)
async def get_ticket_stats(
    staff: Identity = Depends(require_staff),
    ticket_service: TicketService = Depends(get_ticket_service),
) -> TicketStatsResponse:
    """교환/미교환 티켓 수"""
    return ticket_service.get_stats()


@router.get("/{ticket_id}", response_model=TicketDetail)
async def get_ticket(
    ticket_id: str = Path(..., min_length=1, max_length=64, description="교환 티켓 ID"),
    staff: Identity = Depends(require_staff),
    ticket_service: TicketService = Depends(get_ticket_service),
) -> TicketDetail:
    """QR 스캔한 티켓 조회 (스태프 전용)"""
    return ticket_service.get_ticket(ticket_id)


@router.post("/{ticket_id}/claim", response_model=SpinRecordSchema)
async def claim_ticket(
    ticket_id: str = Path(..., min_length=1, max_length=64, description="교환 티켓 ID"),
    staff: Identity = Depends(require_staff),
    ticket_service: TicketService = Depends(get_ticket_service),
) -> SpinRecordSchema:
    """경품 교환 처리 (스태프 전용)

    이미 교환된 티켓이면 409 를 반환합니다.
    """
    return ticket_service.claim(ticket_id, claimed_by=staff.account_id)
