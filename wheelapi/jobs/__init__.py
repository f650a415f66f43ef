from .base import BatchJob, JobResult
from .points_jobs import GrantBonusPointsJob, ResetPointsJob
from .spin_jobs import ReconcileSpinDebitsJob, RenamePrizeLabelsJob

JOBS = {
    GrantBonusPointsJob.name: GrantBonusPointsJob,
    ResetPointsJob.name: ResetPointsJob,
    RenamePrizeLabelsJob.name: RenamePrizeLabelsJob,
    ReconcileSpinDebitsJob.name: ReconcileSpinDebitsJob,
}

__all__ = [
    "BatchJob",
    "JobResult",
    "GrantBonusPointsJob",
    "ResetPointsJob",
    "RenamePrizeLabelsJob",
    "ReconcileSpinDebitsJob",
    "JOBS",
]
