"""Sync service: Open States API client and bill reconciliation into Supabase."""

from .openstates_client import OpenStatesClient
from .records_repository import RecordsRepository
from .sync import SyncService

__all__ = ["OpenStatesClient", "RecordsRepository", "SyncService"]
