"""
Exceptions raised by the sync service.
"""
from typing import Optional


class SyncError(Exception):
    """Base exception for sync-related errors."""
    pass


class SourceAPIError(SyncError):
    """Raised when the Open States API answers with a non-success status."""

    def __init__(self, status: Optional[int], body: str):
        self.status = status
        self.body = body
        super().__init__(f"Open States API error: {status} - {body}")


class StoreError(SyncError):
    """Raised when a query or write against the record store fails."""
    pass


class ValidationError(SyncError):
    """Raised when a sync request is missing a required parameter."""
    pass
