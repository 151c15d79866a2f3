"""
Orchestration: for each state, reconcile the jurisdiction then sync its bills.
"""
import logging
from typing import Iterable, List, Optional

from shared.database.supabase_client import create_supabase_client
from shared.models.sync_result import StateSyncResult, SyncSummary
from shared.utils.config import Settings, get_settings

from .bills import BillSync
from .errors import ValidationError
from .jurisdictions import JurisdictionSync
from .openstates_client import OpenStatesClient
from .records_repository import RecordsRepository

logger = logging.getLogger(__name__)


class SyncService:
    """Service for syncing Open States bills into the record store."""

    def __init__(
        self,
        openstates_client: Optional[OpenStatesClient] = None,
        records_repository: Optional[RecordsRepository] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.openstates_client = openstates_client or OpenStatesClient(settings=self.settings)
        self.records_repository = records_repository or RecordsRepository(
            create_supabase_client(self.settings),
            min_request_interval=self.settings.store_min_request_interval,
        )
        self.jurisdiction_sync = JurisdictionSync(self.records_repository)
        self.bill_sync = BillSync(self.openstates_client, self.records_repository)

    @property
    def supabase(self):
        """Supabase client (e.g. for integration tests)."""
        return self.records_repository.supabase

    def sync_state(
        self,
        state: str,
        limit: Optional[int] = None,
        incremental: bool = False,
    ) -> StateSyncResult:
        """
        Sync one state; any failure is captured in the returned result

        Args:
            state: Two-letter state code
            limit: Maximum bills to sync (default: settings.default_bill_limit)
            incremental: Only sync bills updated since the stored watermark
        """
        if limit is None:
            limit = self.settings.default_bill_limit
        try:
            logger.info(f"=== Syncing state: {state} ===")
            jurisdiction = self.openstates_client.get_jurisdiction(state)
            self.jurisdiction_sync.sync(jurisdiction)

            result = self.bill_sync.sync(state, limit=limit, incremental=incremental)
            return StateSyncResult(
                state=state,
                success=True,
                synced=result.synced,
                total=result.total,
            )
        except Exception as e:
            logger.error(f"Error syncing state {state}: {e}", exc_info=True)
            return StateSyncResult(state=state, success=False, error=str(e))

    def sync_states(
        self,
        states: Iterable[str],
        limit: Optional[int] = None,
        incremental: bool = False,
    ) -> SyncSummary:
        """
        Main sync workflow across states. One state's failure never aborts
        the others.

        Args:
            states: State codes to sync
            limit: Maximum bills per state
            incremental: Only sync bills updated since each state's watermark

        Returns:
            SyncSummary with per-state results and totals

        Raises:
            ValidationError: if no states were requested
        """
        states_to_sync: List[str] = [s for s in states if s]
        if not states_to_sync:
            raise ValidationError("State or states parameter is required")

        results = [
            self.sync_state(state, limit=limit, incremental=incremental)
            for state in states_to_sync
        ]
        total_synced = sum(r.synced or 0 for r in results)
        total_bills = sum(r.total or 0 for r in results)

        logger.info(
            f"Sync complete: {total_synced}/{total_bills} bills across {len(states_to_sync)} state(s), "
            f"{sum(1 for r in results if not r.success)} state(s) failed"
        )
        return SyncSummary(
            success=True,
            message=f"Synced {total_synced} of {total_bills} bills across {len(states_to_sync)} state(s)",
            total_states=len(states_to_sync),
            total_synced=total_synced,
            total_bills=total_bills,
            results=results,
        )
