from .account import AccountProfile, Identity
from .spin import SpinRecordSchema, SpinResponse, SpinHistoryResponse
from .points import PointsLedgerEntry, PointsLedgerResponse
