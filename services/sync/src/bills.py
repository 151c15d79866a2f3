"""
Bill sync for one jurisdiction: fetch -> sync sponsors and subjects -> reconcile bill.
"""
import logging
from typing import List, Optional, Set, Tuple

from shared.models.sync_result import BillSyncResult

from .errors import StoreError
from .legislators import LegislatorSync
from .openstates_client import OpenStatesClient
from .parser import extract_sponsor_people, parse_bill_data
from .records_repository import BILLS_TABLE, RecordsRepository
from .subjects import SubjectSync

logger = logging.getLogger(__name__)


class BillSync:
    """Syncs bills for one jurisdiction, isolating failures to a single bill."""

    KEY_FIELD = "openstates_id"
    INCLUDE = ("sponsorships", "abstracts")

    def __init__(
        self,
        client: OpenStatesClient,
        repository: RecordsRepository,
        legislator_sync: Optional[LegislatorSync] = None,
        subject_sync: Optional[SubjectSync] = None,
    ):
        self.client = client
        self.repository = repository
        self.legislator_sync = legislator_sync or LegislatorSync(client, repository)
        self.subject_sync = subject_sync or SubjectSync(repository)

    def sync(self, state: str, limit: int = 50, incremental: bool = False) -> BillSyncResult:
        """
        Sync up to ``limit`` bills for a state

        Args:
            state: Two-letter state code (any case)
            limit: Maximum number of bills to fetch
            incremental: Only fetch bills updated since the stored watermark,
                and advance the watermark when every fetched bill synced

        Returns:
            BillSyncResult with synced and total counts

        Raises:
            SourceAPIError: if the bills themselves cannot be fetched
        """
        updated_since = None
        boundary_ids: Set[str] = set()
        fetch_limit = limit
        if incremental:
            watermark = self.repository.get_watermark(state)
            if watermark:
                updated_since = watermark.last_updated_at
                boundary_ids = set(watermark.boundary_ids)
                # updated_since is inclusive: bills already synced at the boundary come back first
                fetch_limit = limit + len(boundary_ids)
                logger.info(f"Incremental mode: fetching {state.upper()} bills updated since {updated_since}")

        logger.info(f"Fetching bills for {state.upper()}...")
        bills = self.client.get_bills(
            state.lower(),
            limit=fetch_limit,
            include=self.INCLUDE,
            updated_since=updated_since,
        )
        if boundary_ids:
            bills = [
                b for b in bills
                if not (b.get("updated_at") == updated_since and b.get("id") in boundary_ids)
            ][:limit]
        logger.info(f"Found {len(bills)} bills to sync")

        result = BillSyncResult(total=len(bills))
        synced_positions: List[Tuple[str, str]] = []

        for i, raw_bill in enumerate(bills, 1):
            identifier = raw_bill.get("identifier") or raw_bill.get("id")
            try:
                sponsor_ids = self.legislator_sync.sync(extract_sponsor_people(raw_bill))
                subject_ids = self.subject_sync.sync(raw_bill.get("subject") or [])

                bill = parse_bill_data(raw_bill, state, sponsor_ids, subject_ids)
                if len(sponsor_ids) > len(bill.sponsor_ids):
                    logger.debug(
                        f"{identifier}: linking first {len(bill.sponsor_ids)} of {len(sponsor_ids)} sponsors"
                    )

                self.repository.reconcile(
                    BILLS_TABLE,
                    self.KEY_FIELD,
                    bill.openstates_id,
                    self.repository.model_to_row(bill),
                )
                result.synced += 1
                logger.debug(f"Synced {identifier} ({i}/{len(bills)}): {bill.title[:60]}")

                if raw_bill.get("updated_at"):
                    synced_positions.append((raw_bill["updated_at"], bill.openstates_id))

            except Exception as e:
                logger.error(f"Error syncing bill {identifier}: {e}", exc_info=True)
                result.failed_bill_ids.append(str(raw_bill.get("id")))
                continue

        if incremental and synced_positions:
            self._advance_watermark(state, updated_since, boundary_ids, synced_positions, result)

        logger.info(f"Completed {state.upper()}: {result.synced}/{result.total} bills")
        return result

    def _advance_watermark(
        self,
        state: str,
        updated_since: Optional[str],
        boundary_ids: Set[str],
        synced_positions: List[Tuple[str, str]],
        result: BillSyncResult,
    ) -> None:
        if result.failed_bill_ids:
            logger.warning(
                f"Not advancing {state.upper()} watermark: {len(result.failed_bill_ids)} bills failed"
            )
            return

        newest = max(updated_at for updated_at, _ in synced_positions)
        new_boundary = {bill_id for updated_at, bill_id in synced_positions if updated_at == newest}
        if newest == updated_since:
            new_boundary |= boundary_ids

        try:
            self.repository.set_watermark(state, newest, new_boundary)
            logger.info(
                f"Advanced {state.upper()} watermark to {newest} ({len(new_boundary)} bills at boundary)"
            )
        except StoreError as e:
            logger.warning(f"Could not advance {state.upper()} watermark: {e}")
