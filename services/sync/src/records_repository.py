"""
Record store access: find-or-create reconciliation against Supabase tables.
"""
import time
import logging
import threading
from datetime import datetime
from typing import Any, Dict, Iterable, Optional

from pydantic import BaseModel

from shared.models.sync_watermark import SyncWatermark

from .errors import StoreError

logger = logging.getLogger(__name__)

BILLS_TABLE = "bills"
LEGISLATORS_TABLE = "legislators"
SUBJECTS_TABLE = "subjects"
STATES_TABLE = "states"
WATERMARKS_TABLE = "sync_watermarks"


class RecordsRepository:
    """Single place for all record-store access."""

    # Reconciliation is serialized per (table, key) through this many locks
    LOCK_STRIPES = 64

    def __init__(self, supabase_client, min_request_interval: float = 0.2):
        self.supabase = supabase_client
        self.min_request_interval = min_request_interval
        self.last_request_time = 0.0
        self.request_count = 0
        self._throttle_lock = threading.Lock()
        self._key_locks = [threading.Lock() for _ in range(self.LOCK_STRIPES)]

    def _throttle(self) -> None:
        with self._throttle_lock:
            time_since_last = time.time() - self.last_request_time
            if time_since_last < self.min_request_interval:
                time.sleep(self.min_request_interval - time_since_last)
            self.last_request_time = time.time()
            self.request_count += 1

    def _lock_for(self, table: str, key_value: Any) -> threading.Lock:
        return self._key_locks[hash((table, str(key_value))) % self.LOCK_STRIPES]

    @staticmethod
    def model_to_row(model: BaseModel) -> Dict[str, Any]:
        """
        Build a row dict from a model: no internal id, no None values and no
        empty link lists, so updates never blank out fields we did not map.
        """
        row = model.model_dump(exclude={"id"}, exclude_none=True)
        return {k: v for k, v in row.items() if v != []}

    def find_record_id(self, table: str, key_field: str, key_value: Any) -> Optional[str]:
        """
        Look up the internal id of the single record where key_field == key_value.

        Returns:
            Record id, or None if no record matches
        """
        self._throttle()
        try:
            result = (
                self.supabase.table(table)
                .select("id")
                .eq(key_field, key_value)
                .limit(1)
                .execute()
            )
        except Exception as e:
            raise StoreError(f"Error querying {table} for {key_field}={key_value!r}: {e}") from e

        rows = getattr(result, "data", None) or []
        return rows[0]["id"] if rows else None

    def create_record(self, table: str, fields: Dict[str, Any]) -> str:
        """Insert a record and return its new internal id"""
        now = datetime.now().isoformat()
        row = {**fields, "created_at": now, "updated_at": now}
        self._throttle()
        try:
            result = self.supabase.table(table).insert(row).execute()
        except Exception as e:
            raise StoreError(f"Error inserting into {table}: {e}") from e

        rows = getattr(result, "data", None) or []
        if not rows or not rows[0].get("id"):
            raise StoreError(f"Insert into {table} returned no record id")
        return rows[0]["id"]

    def update_record(self, table: str, record_id: str, fields: Dict[str, Any]) -> None:
        """Partially update a record; fields not in ``fields`` are left alone"""
        row = {**fields, "updated_at": datetime.now().isoformat()}
        self._throttle()
        try:
            self.supabase.table(table).update(row).eq("id", record_id).execute()
        except Exception as e:
            raise StoreError(f"Error updating {table} record {record_id}: {e}") from e

    def reconcile(
        self,
        table: str,
        key_field: str,
        key_value: Any,
        fields: Dict[str, Any],
    ) -> str:
        """
        Find the record keyed by key_field == key_value and update it, or
        create it when missing.

        Args:
            table: Target table
            key_field: Column holding the external/natural key
            key_value: Key to reconcile on
            fields: Field set to write (key_field is always included)

        Returns:
            Internal id of the updated or created record

        Raises:
            StoreError: if the key is empty or the store call fails
        """
        if key_value in (None, ""):
            raise StoreError(f"Cannot reconcile {table} record without a {key_field}")

        fields = {**fields, key_field: key_value}
        # In-process only; separate processes can still race on the same key
        with self._lock_for(table, key_value):
            record_id = self.find_record_id(table, key_field, key_value)
            if record_id:
                self.update_record(table, record_id, fields)
                logger.debug(f"Updated {table} record {record_id} ({key_field}={key_value!r})")
                return record_id

            record_id = self.create_record(table, fields)
            logger.debug(f"Created {table} record {record_id} ({key_field}={key_value!r})")
            return record_id

    def get_watermark(self, state: str) -> Optional[SyncWatermark]:
        """
        Get the incremental sync position for a state.

        Returns:
            SyncWatermark, or None if the state was never synced incrementally
        """
        self._throttle()
        try:
            result = (
                self.supabase.table(WATERMARKS_TABLE)
                .select("last_updated_at, boundary_ids")
                .eq("state", state.upper())
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.warning(f"Error reading watermark for {state}: {e}, will sync all bills")
            return None

        rows = getattr(result, "data", None) or []
        if not rows or not rows[0].get("last_updated_at"):
            return None
        return SyncWatermark(
            state=state.upper(),
            last_updated_at=rows[0]["last_updated_at"],
            boundary_ids=rows[0].get("boundary_ids") or [],
        )

    def set_watermark(
        self,
        state: str,
        last_updated_at: str,
        boundary_ids: Iterable[str] = (),
    ) -> str:
        """Persist the sync watermark for a state"""
        return self.reconcile(
            WATERMARKS_TABLE,
            "state",
            state.upper(),
            {"last_updated_at": last_updated_at, "boundary_ids": sorted(boundary_ids)},
        )
