from metadata_sync.shared.exceptions.base import AppException
from metadata_sync.shared.exceptions.sync import (
    ConfigurationError,
    FatalSyncError,
    InvalidSyncDirectionError,
    SnapshotRetrievalError,
    UnresolvedBannedCharactersError,
)

__all__ = [
    "AppException",
    "ConfigurationError",
    "FatalSyncError",
    "InvalidSyncDirectionError",
    "SnapshotRetrievalError",
    "UnresolvedBannedCharactersError",
]
