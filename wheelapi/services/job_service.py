import logging
from typing import Any, Dict

from sqlalchemy.orm import Session

from wheelapi.core.exceptions import InvalidInputError, NotFoundError, ValidationError
from wheelapi.jobs import JOBS
from wheelapi.schemas.jobs import JobRunResponse

logger = logging.getLogger(__name__)


class JobService:
    """관리자 화면에서 배치 작업 실행"""

    def __init__(self, db: Session):
        self.db = db

    def run(
        self, job_name: str, params: Dict[str, Any], dry_run: bool = False
    ) -> JobRunResponse:
        job_class = JOBS.get(job_name)
        if job_class is None:
            raise NotFoundError(
                f"Unknown job: {job_name}", details={"available": sorted(JOBS)}
            )

        try:
            job = job_class(self.db, **params)
        except TypeError as e:
            raise ValidationError(f"Invalid parameters for {job_name}: {str(e)}")
        except InvalidInputError as e:
            raise ValidationError(str(e))

        result = job.run(dry_run=dry_run)
        return JobRunResponse(
            job_name=result.job_name,
            dry_run=result.dry_run,
            examined=result.examined,
            migrated=result.migrated,
            skipped=result.skipped,
            failed=result.failed,
            execution_time_ms=result.execution_time_ms,
        )
