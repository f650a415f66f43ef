import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from wheelapi.config import settings
from wheelapi.database.session import get_db
from wheelapi.schemas.health import HealthCheckResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health", response_model=HealthCheckResponse)
async def health_check(db: Session = Depends(get_db)) -> HealthCheckResponse:
    """Health check endpoint."""

    status, database = "healthy", "ok"
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Health check database error: {str(e)}")
        status, database = "degraded", "unavailable"

    return HealthCheckResponse(
        status=status,
        environment=settings.ENVIRONMENT,
        database=database,
        checked_at=datetime.now(timezone.utc),
    )
