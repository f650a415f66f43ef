# Repository layer - Data access with Pydantic responses

from .base import BaseRepository
from .account_repository import AccountRepository
from .spin_repository import SpinRepository
from .points_repository import PointsRepository

__all__ = [
    "BaseRepository",
    "AccountRepository",
    "SpinRepository",
    "PointsRepository",
]
