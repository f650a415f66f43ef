"""Pydantic models for health endpoints."""

from datetime import datetime
from pydantic import BaseModel


class HealthCheckResponse(BaseModel):
    """Liveness plus a database round trip."""

    status: str
    environment: str
    database: str
    checked_at: datetime
