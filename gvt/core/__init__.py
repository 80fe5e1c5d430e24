"""Core modules for gvt."""

from .checkout import CheckoutEngine, walk_tree
from .controller import GvtController, GvtStatus
from .history_log import HistoryLog
from .snapshot_store import SnapshotStore
from .types import (
    CheckoutSummary,
    ErrorKind,
    Failure,
    LogEntry,
    OperationResult,
    RepositoryError,
    TreeEntry,
    VersionInfo,
)

__all__ = [
    "CheckoutEngine",
    "walk_tree",
    "GvtController",
    "GvtStatus",
    "HistoryLog",
    "SnapshotStore",
    "CheckoutSummary",
    "ErrorKind",
    "Failure",
    "LogEntry",
    "OperationResult",
    "RepositoryError",
    "TreeEntry",
    "VersionInfo",
]
