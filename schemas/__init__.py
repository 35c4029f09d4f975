from .contact import (
    MAX_REPORTED_ERRORS,
    MappedContact,
    SyncError,
    SyncResult,
)

__all__ = [
    "MAX_REPORTED_ERRORS", "MappedContact", "SyncError", "SyncResult",
]
