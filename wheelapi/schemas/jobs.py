from pydantic import BaseModel, Field
from typing import Any, Dict, Optional


class JobRunRequest(BaseModel):
    """배치 작업 실행 요청"""

    params: Dict[str, Any] = Field(default_factory=dict)
    dry_run: bool = False


class JobRunResponse(BaseModel):
    job_name: str
    dry_run: bool
    examined: int
    migrated: int
    skipped: int
    failed: int
    execution_time_ms: Optional[int] = None
