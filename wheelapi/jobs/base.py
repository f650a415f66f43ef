"""
배치 작업 베이스

각 작업은 레코드 집합을 순회하면서 레코드마다 is_migrated() 로 처리 여부를 판단하고,
처리되지 않은 레코드에만 migrate() 를 적용한다. 같은 작업을 여러 번 실행해도
두 번째 실행부터는 아무것도 바뀌지 않는다.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from wheelapi.core.exceptions import BaseAPIException

logger = logging.getLogger(__name__)


@dataclass
class JobResult:
    """작업 실행 결과"""
    job_name: str
    dry_run: bool
    examined: int = 0
    migrated: int = 0
    skipped: int = 0
    failed: int = 0
    execution_time_ms: Optional[int] = None


class BatchJob(ABC):
    name: str = ""

    def __init__(self, db: Session):
        self.db = db

    @abstractmethod
    def records(self) -> Iterable[Any]:
        """순회할 레코드"""

    @abstractmethod
    def is_migrated(self, record: Any) -> bool:
        """이미 처리된 레코드면 True"""

    @abstractmethod
    def migrate(self, record: Any) -> None:
        """레코드 하나를 처리하고 커밋"""

    def describe(self, record: Any) -> str:
        return str(getattr(record, "id", record))

    def run(self, dry_run: bool = False) -> JobResult:
        result = JobResult(job_name=self.name, dry_run=dry_run)
        start_time = time.monotonic()
        logger.info(f"Starting job {self.name} (dry_run={dry_run})")

        for record in self.records():
            result.examined += 1
            label = self.describe(record)
            try:
                if self.is_migrated(record):
                    result.skipped += 1
                    continue
                if dry_run:
                    logger.info(f"[{self.name}] would migrate {label}")
                    result.migrated += 1
                    continue
                self.migrate(record)
                result.migrated += 1
                logger.info(f"[{self.name}] migrated {label}")
            except (SQLAlchemyError, BaseAPIException) as e:
                self.db.rollback()
                result.failed += 1
                logger.error(f"[{self.name}] failed on {label}: {str(e)}")

        result.execution_time_ms = int((time.monotonic() - start_time) * 1000)
        logger.info(
            f"Finished job {self.name}: examined={result.examined} migrated={result.migrated} "
            f"skipped={result.skipped} failed={result.failed}"
        )
        return result
